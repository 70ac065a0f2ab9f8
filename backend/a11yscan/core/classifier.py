from typing import Iterable, List, Optional, Tuple
from a11yscan.core.rules import ClassificationTables, DEFAULT_TABLES
from a11yscan.models.schemas import AffectedNode, ClassifiedIssue, RawFinding

IMPACT_SEVERITY = {
    "critical": "critical",
    "serious": "major",
    "moderate": "minor",
    "minor": "minor",
}


def map_impact_to_severity(impact: Optional[str]) -> str:
    # unknown or missing impact never rejects the finding
    return IMPACT_SEVERITY.get(impact or "", "minor")


class FindingClassifier:
    """Maps rule-checker findings onto severity, category, criterion and remediation."""

    def __init__(self, tables: ClassificationTables = DEFAULT_TABLES):
        self.tables = tables

    def category(self, tags: Iterable[str], rule_id: str) -> Tuple[str, str]:
        tags = list(tags)
        for rule in self.tables.category_rules:
            if rule.matches(tags, rule_id):
                return rule.category, rule.sub_category
        return self.tables.fallback_category

    def criterion(self, tags: Iterable[str], rule_id: str) -> str:
        tags = list(tags)
        for tag in tags:
            if tag in self.tables.criteria:
                return self.tables.criteria[tag]

        for parts, label in self.tables.aoda_criteria:
            if any(p in rule_id for p in parts):
                return label

        for tag, label in self.tables.tier_criteria:
            if tag in tags:
                return label
        return self.tables.generic_criterion

    def remediation(self, rule_id: str, category: str) -> str:
        return (
            self.tables.rule_fixes.get(rule_id)
            or self.tables.category_fixes.get(category)
            or self.tables.generic_fix
        )

    def classify(self, finding: RawFinding, node: AffectedNode, scan_id: str) -> ClassifiedIssue:
        category, sub_category = self.category(finding.tags, finding.id)
        return ClassifiedIssue(
            scan_id=scan_id,
            criterion=self.criterion(finding.tags, finding.id),
            severity=map_impact_to_severity(finding.impact),
            category=category,
            sub_category=sub_category,
            title=finding.help or finding.id,
            description=finding.description,
            element=node.html,
            remediation=self.remediation(finding.id, category),
            impact=finding.impact,
            help_url=finding.help_url,
            origin="automated",
        )

    def classify_all(self, findings: Iterable[RawFinding], scan_id: str) -> List[ClassifiedIssue]:
        """One issue per affected node, in finding then node order."""
        return [
            self.classify(finding, node, scan_id)
            for finding in findings
            for node in finding.nodes
        ]
