from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class AnalyzerPlan:
    """Which heuristic analyzers a scan runs, derived from the requested levels."""
    reading: bool = False
    cognitive: bool = False
    multimedia: bool = False
    navigation: bool = False

    @classmethod
    def from_levels(cls, levels: Iterable[str]) -> "AnalyzerPlan":
        levels = set(levels)
        aoda = "AODA" in levels
        cognitive = "COGNITIVE" in levels or aoda
        return cls(
            # reading level only ever runs alongside cognitive load
            reading=cognitive,
            cognitive=cognitive,
            multimedia="MULTIMEDIA" in levels or aoda,
            navigation="AAA" in levels or aoda,
        )

    def keys(self) -> List[str]:
        order = ("reading", "cognitive", "multimedia", "navigation")
        return [k for k in order if getattr(self, k)]
