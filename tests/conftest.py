import logging
from typing import List, Optional

import pytest

from a11yscan.models.schemas import AffectedNode, PageMetrics, RawFinding

SIMPLE_TEXT = "The cat sat on the mat."
DENSE_TEXT = (
    "Institutionalization characteristically necessitates "
    "comprehensive administrative reorganization."
)


def make_finding(rule_id: str = "image-alt", impact: Optional[str] = "serious",
                 tags: Optional[List[str]] = None, nodes: int = 1) -> RawFinding:
    return RawFinding(
        id=rule_id,
        impact=impact,
        description=f"{rule_id} description",
        help=f"{rule_id} help",
        help_url=f"https://dequeuniversity.com/rules/axe/4.8/{rule_id}",
        tags=tags if tags is not None else ["wcag2a"],
        nodes=[AffectedNode(html=f"<div id='n{i}'></div>", target=[f"#n{i}"]) for i in range(nodes)],
    )


@pytest.fixture
def finding_factory():
    return make_finding


@pytest.fixture
def good_metrics() -> PageMetrics:
    """A page that passes every heuristic."""
    return PageMetrics(
        body_text=SIMPLE_TEXT,
        total_elements=20,
        interactive_elements=6,
        form_elements=0,
        links=5,
        heading_tags=["H1", "H2"],
        images_with_alt=2,
        has_skip_links=True,
        has_landmarks=True,
        nav_elements=1,
        focusable_elements=10,
    )


@pytest.fixture
def empty_metrics() -> PageMetrics:
    return PageMetrics()


@pytest.fixture(autouse=True)
def package_logger():
    """Drop any handler configure_logging attached during the test."""
    logger = logging.getLogger("a11yscan")
    before = list(logger.handlers)
    yield logger
    for handler in logger.handlers[:]:
        if handler not in before:
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
