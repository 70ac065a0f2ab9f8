"""
Classification tables for rule-checker findings.

Built once at import time and handed to the classifier by reference; nothing here
is mutated after construction.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, Tuple


class CategoryRule(NamedTuple):
    category: str
    sub_category: str
    any_tags: Tuple[str, ...] = ()
    all_tags: Tuple[str, ...] = ()
    id_contains: Tuple[str, ...] = ()

    def matches(self, tags: Iterable[str], rule_id: str) -> bool:
        tags = set(tags)
        if self.all_tags and all(t in tags for t in self.all_tags):
            return True
        if any(t in tags for t in self.any_tags):
            return True
        return any(part in rule_id for part in self.id_contains)


# Order matters: first match wins, and categories drive grouping in reports.
CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule("Visual Accessibility", "Color Contrast", any_tags=("color-contrast",), id_contains=("contrast",)),
    CategoryRule("Multimedia", "Alternative Text", all_tags=("wcag2a", "cat.text-alternatives")),
    CategoryRule("Navigation & Usability", "Keyboard Navigation", any_tags=("keyboard",), id_contains=("keyboard",)),
    CategoryRule("Enhanced Navigation", "ARIA Support", any_tags=("cat.aria",), id_contains=("aria",)),
    CategoryRule("Cognitive & Reading", "Content Structure", any_tags=("cat.structure",), id_contains=("heading",)),
    CategoryRule("Navigation & Usability", "Element Identification", any_tags=("cat.name-role-value",)),
    CategoryRule("Enhanced Navigation", "Form Accessibility", any_tags=("cat.forms",)),
    CategoryRule("Cognitive & Reading", "Data Tables", any_tags=("cat.tables",)),
    CategoryRule("Multimedia", "Time-Based Media", any_tags=("cat.time-based-media",)),
    CategoryRule("Cognitive & Reading", "Language & Readability", any_tags=("cat.language",)),
)

FALLBACK_CATEGORY = ("General Compliance", "Other")

WCAG_CRITERIA: Mapping[str, str] = MappingProxyType({
    "wcag111": "WCAG 2.1 A - 1.1.1 Non-text Content",
    "wcag141": "WCAG 2.1 A - 1.4.1 Use of Color",
    "wcag143": "WCAG 2.1 AA - 1.4.3 Contrast (Minimum)",
    "wcag146": "WCAG 2.1 AAA - 1.4.6 Contrast (Enhanced)",
    "wcag148": "WCAG 2.1 AAA - 1.4.8 Visual Presentation",
    "wcag211": "WCAG 2.1 A - 2.1.1 Keyboard",
    "wcag212": "WCAG 2.1 A - 2.1.2 No Keyboard Trap",
    "wcag214": "WCAG 2.1 AAA - 2.1.4 Character Key Shortcuts",
    "wcag241": "WCAG 2.1 A - 2.4.1 Bypass Blocks",
    "wcag242": "WCAG 2.1 A - 2.4.2 Page Titled",
    "wcag243": "WCAG 2.1 A - 2.4.3 Focus Order",
    "wcag244": "WCAG 2.1 A - 2.4.4 Link Purpose (In Context)",
    "wcag245": "WCAG 2.1 AA - 2.4.5 Multiple Ways",
    "wcag246": "WCAG 2.1 AA - 2.4.6 Headings and Labels",
    "wcag247": "WCAG 2.1 AA - 2.4.7 Focus Visible",
    "wcag248": "WCAG 2.1 AAA - 2.4.8 Location",
    "wcag249": "WCAG 2.1 AAA - 2.4.9 Link Purpose (Link Only)",
    "wcag2410": "WCAG 2.1 AAA - 2.4.10 Section Headings",
    "wcag321": "WCAG 2.1 A - 3.2.1 On Focus",
    "wcag322": "WCAG 2.1 A - 3.2.2 On Input",
    "wcag323": "WCAG 2.1 AA - 3.2.3 Consistent Navigation",
    "wcag324": "WCAG 2.1 AA - 3.2.4 Consistent Identification",
    "wcag325": "WCAG 2.1 AAA - 3.2.5 Change on Request",
    "wcag331": "WCAG 2.1 A - 3.3.1 Error Identification",
    "wcag332": "WCAG 2.1 A - 3.3.2 Labels or Instructions",
    "wcag333": "WCAG 2.1 AA - 3.3.3 Error Suggestion",
    "wcag334": "WCAG 2.1 AA - 3.3.4 Error Prevention (Legal, Financial, Data)",
    "wcag335": "WCAG 2.1 AAA - 3.3.5 Help",
    "wcag336": "WCAG 2.1 AAA - 3.3.6 Error Prevention (All)",
    "wcag411": "WCAG 2.1 A - 4.1.1 Parsing",
    "wcag412": "WCAG 2.1 A - 4.1.2 Name, Role, Value",
    "wcag413": "WCAG 2.1 AA - 4.1.3 Status Messages",
})

AODA_COGNITIVE = "AODA - Cognitive & Reading Support"
AODA_MULTIMEDIA = "AODA - Multimedia Accessibility"
AAA_NAVIGATION = "WCAG 2.1 AAA - Enhanced Navigation"

# (rule id substrings, criterion)
AODA_CRITERIA: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("reading-level", "cognitive"), AODA_COGNITIVE),
    (("sign-language", "multimedia"), AODA_MULTIMEDIA),
)

# broadest tier first
TIER_CRITERIA: Tuple[Tuple[str, str], ...] = (
    ("wcag2aaa", "WCAG 2.1 AAA"),
    ("wcag2aa", "WCAG 2.1 AA"),
    ("wcag2a", "WCAG 2.1 A"),
)

GENERIC_CRITERION = "WCAG 2.1 Enhanced"

RULE_FIXES: Mapping[str, str] = MappingProxyType({
    "color-contrast": "Ensure color contrast ratio meets WCAG AAA standards (7:1 for normal text, 4.5:1 for large text). Consider implementing high contrast mode toggle.",
    "image-alt": "Provide comprehensive alt text that describes both the image content and its purpose. For decorative images, use empty alt=\"\" or aria-hidden=\"true\".",
    "link-name": "Use descriptive link text that clearly indicates the destination or purpose. Avoid generic terms like \"click here\" or \"read more\".",
    "button-name": "Ensure buttons have clear, descriptive names via text content, aria-label, or aria-labelledby. Include action context.",
    "form-field-multiple-labels": "Use a single, clear label for each form field. Implement fieldset and legend for grouped fields.",
    "heading-order": "Maintain logical heading hierarchy (h1 > h2 > h3) for screen reader navigation and cognitive clarity.",
    "landmark-unique": "Provide unique, descriptive names for landmarks using aria-label or aria-labelledby for better navigation.",
    "aria-hidden-focus": "Never hide focusable elements from screen readers. Use visible focus indicators and proper focus management.",
    "tabindex": "Avoid positive tabindex values. Use tabindex=\"0\" for programmatically focusable elements, \"-1\" for programmatic focus only.",
    "page-has-heading-one": "Include exactly one h1 element per page that describes the main content or purpose.",
    "region": "Wrap all page content in appropriate landmarks (main, nav, aside, footer) for better screen reader navigation.",
    "skip-link": "Implement visible skip links that allow keyboard users to bypass repetitive navigation.",
    "focus-order-semantics": "Ensure focus order follows logical reading sequence and matches visual layout.",
    "label-content-name-mismatch": "Ensure visible text labels match accessible names for voice control users.",
})

CATEGORY_FIXES: Mapping[str, str] = MappingProxyType({
    "Cognitive & Reading": "Consider reading level, cognitive load, and content complexity. Use clear language, short sentences, and logical information hierarchy.",
    "Visual Accessibility": "Implement multiple visual cues beyond color. Consider text spacing, font choices, and high contrast options.",
    "Multimedia": "Provide comprehensive alternatives: captions, transcripts, audio descriptions, and sign language interpretation where appropriate.",
    "Navigation & Usability": "Ensure consistent navigation patterns, clear error messages, and robust keyboard support throughout the interface.",
    "Enhanced Navigation": "Implement advanced ARIA patterns, custom keyboard shortcuts, and clear focus management for complex interactions.",
})

GENERIC_FIX = "Review WCAG 2.1 AAA guidelines and implement comprehensive accessibility improvements for this issue."

# Rule-checker tags to run for each requested level.
LEVEL_RULE_TAGS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "A": ("wcag2a",),
    "AA": ("wcag2aa",),
    "AAA": ("wcag2aaa",),
    "AODA": ("wcag2aa",),
    "COGNITIVE": ("wcag2aaa", "cat.language"),
    "MULTIMEDIA": ("wcag2aa", "wcag2aaa", "cat.time-based-media"),
})

ALWAYS_RULE_TAGS: Tuple[str, ...] = ("best-practice",)


@dataclass(frozen=True)
class ClassificationTables:
    category_rules: Tuple[CategoryRule, ...] = CATEGORY_RULES
    fallback_category: Tuple[str, str] = FALLBACK_CATEGORY
    criteria: Mapping[str, str] = field(default_factory=lambda: WCAG_CRITERIA)
    aoda_criteria: Tuple[Tuple[Tuple[str, ...], str], ...] = AODA_CRITERIA
    tier_criteria: Tuple[Tuple[str, str], ...] = TIER_CRITERIA
    generic_criterion: str = GENERIC_CRITERION
    rule_fixes: Mapping[str, str] = field(default_factory=lambda: RULE_FIXES)
    category_fixes: Mapping[str, str] = field(default_factory=lambda: CATEGORY_FIXES)
    generic_fix: str = GENERIC_FIX


DEFAULT_TABLES = ClassificationTables()


def rule_tags_for(levels: Iterable[str]) -> list:
    """Tags the rule checker should run for the requested levels, in first-seen order."""
    tags = []
    for level in levels:
        for tag in LEVEL_RULE_TAGS.get(level, ()):
            if tag not in tags:
                tags.append(tag)
    for tag in ALWAYS_RULE_TAGS:
        if tag not in tags:
            tags.append(tag)
    return tags
