import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union
from pydantic import ValidationError
from a11yscan.core.errors import SourceError
from a11yscan.models.schemas import RawFinding

logger = logging.getLogger(__name__)


def parse_axe_results(results: Dict[str, Any]) -> List[RawFinding]:
    """Turn an axe-core ``analyze()`` result into raw findings (violations only).

    A violation that cannot be read is logged and skipped; only a payload that
    is unusable as a whole raises ``SourceError``.
    """
    if not isinstance(results, dict):
        raise SourceError("axe results must be a JSON object")
    if results.get("error"):
        raise SourceError(f"rule checker reported an error: {results['error']}")
    violations = results.get("violations")
    if not isinstance(violations, list):
        raise SourceError("axe results have no 'violations' array")

    findings = []
    for index, violation in enumerate(violations):
        try:
            findings.append(RawFinding.model_validate(violation))
        except ValidationError as e:
            logger.warning("skipping malformed axe violation #%d: %s", index, e)
    return findings


class AxeResultsFindingSource:
    """Findings from an axe-core result that was produced out of band (dict or JSON file)."""

    def __init__(self, results: Union[Dict[str, Any], str, Path]):
        self.results = results

    def _load(self) -> Dict[str, Any]:
        if isinstance(self.results, dict):
            return self.results
        try:
            return json.loads(Path(self.results).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SourceError(f"could not read axe results from {self.results}: {e}") from e

    async def fetch_findings(self, url: str, tags: Sequence[str]) -> List[RawFinding]:
        # the checker already ran; tag selection happened on its side
        return parse_axe_results(self._load())
