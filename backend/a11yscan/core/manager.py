import asyncio
import datetime
import logging
import uuid
from typing import Any, Dict, List, Optional, Protocol
from a11yscan.core.classifier import FindingClassifier
from a11yscan.core.engine import run_scan
from a11yscan.core.errors import InvalidScanStateError, ScanFailedError, ScanNotFoundError
from a11yscan.models.schemas import ClassifiedIssue, ScanOutcome, ScanReport, ScanRequest
from a11yscan.sources.base import FindingSource, MetricsSource

logger = logging.getLogger(__name__)

TRANSITIONS = {
    "pending": {"scanning", "failed"},
    "scanning": {"completed", "failed"},
    "completed": set(),
    "failed": set(),
}


class ScanStore(Protocol):
    def create(self, outcome: ScanOutcome) -> ScanOutcome: ...
    def get(self, scan_id: str) -> Optional[ScanOutcome]: ...
    def update(self, scan_id: str, **updates: Any) -> ScanOutcome: ...
    def replace_issues(self, scan_id: str, issues: List[ClassifiedIssue]) -> None: ...
    def issues(self, scan_id: str) -> List[ClassifiedIssue]: ...
    def all(self) -> List[ScanOutcome]: ...


class MemoryScanStore:
    """Process-local stand-in for the persistence collaborator."""

    def __init__(self) -> None:
        self._scans: Dict[str, ScanOutcome] = {}
        self._issues: Dict[str, List[ClassifiedIssue]] = {}

    def create(self, outcome: ScanOutcome) -> ScanOutcome:
        self._scans[outcome.scan_id] = outcome
        self._issues[outcome.scan_id] = []
        return outcome

    def get(self, scan_id: str) -> Optional[ScanOutcome]:
        return self._scans.get(scan_id)

    def update(self, scan_id: str, **updates: Any) -> ScanOutcome:
        if scan_id not in self._scans:
            raise ScanNotFoundError(scan_id)
        outcome = self._scans[scan_id].model_copy(update=updates)
        self._scans[scan_id] = outcome
        return outcome

    def replace_issues(self, scan_id: str, issues: List[ClassifiedIssue]) -> None:
        self._issues[scan_id] = list(issues)

    def issues(self, scan_id: str) -> List[ClassifiedIssue]:
        return list(self._issues.get(scan_id, []))

    def all(self) -> List[ScanOutcome]:
        return sorted(self._scans.values(), key=lambda s: s.created_at, reverse=True)


class ScanManager:
    """Owns the scan lifecycle: pending -> scanning -> completed | failed.

    Each submitted scan runs as its own asyncio task keyed by scan id. Nothing
    is shared between scans except the store, which is partitioned by id.
    """

    def __init__(self, finding_source: FindingSource, metrics_source: MetricsSource,
                 store: Optional[ScanStore] = None, classifier: Optional[FindingClassifier] = None):
        self.finding_source = finding_source
        self.metrics_source = metrics_source
        self.store = store if store is not None else MemoryScanStore()
        self.classifier = classifier or FindingClassifier()
        self._tasks: Dict[str, asyncio.Task] = {}

    def create_scan(self, request: ScanRequest) -> ScanOutcome:
        outcome = ScanOutcome(scan_id=str(uuid.uuid4()), url=str(request.url), levels=list(request.levels))
        return self.store.create(outcome)

    def get_scan(self, scan_id: str) -> ScanOutcome:
        outcome = self.store.get(scan_id)
        if outcome is None:
            raise ScanNotFoundError(scan_id)
        return outcome

    def get_issues(self, scan_id: str) -> List[ClassifiedIssue]:
        self.get_scan(scan_id)
        return self.store.issues(scan_id)

    def list_scans(self) -> List[ScanOutcome]:
        return self.store.all()

    def _transition(self, scan_id: str, status: str, **updates: Any) -> ScanOutcome:
        current = self.get_scan(scan_id).status
        if status not in TRANSITIONS[current]:
            raise InvalidScanStateError(scan_id, current, status)
        return self.store.update(scan_id, status=status, **updates)

    async def execute(self, scan_id: str) -> ScanOutcome:
        """Run a pending scan to completion or failure and return the final outcome."""
        scan = self._transition(scan_id, "scanning")
        request = ScanRequest(url=scan.url, levels=scan.levels)
        try:
            report: ScanReport = await run_scan(
                request, self.finding_source, self.metrics_source,
                scan_id=scan_id, classifier=self.classifier,
            )
        except ScanFailedError as e:
            logger.exception("scan %s failed: %s", scan_id, e.reason)
            return self._fail(scan_id, e.reason)
        except Exception as e:  # noqa: BLE001
            logger.exception("scan %s crashed", scan_id)
            return self._fail(scan_id, repr(e))

        self.store.replace_issues(scan_id, report.issues)
        result = report.outcome.model_dump(exclude={"scan_id", "url", "levels", "status", "created_at"})
        return self._transition(scan_id, "completed", **result)

    def _fail(self, scan_id: str, reason: str) -> ScanOutcome:
        self.store.replace_issues(scan_id, [])
        return self._transition(
            scan_id, "failed",
            error=reason,
            completed_at=datetime.datetime.now(datetime.timezone.utc),
        )

    def submit(self, request: ScanRequest) -> ScanOutcome:
        """Create a scan and start it in the background; must be called inside a running loop."""
        outcome = self.create_scan(request)
        scan_id = outcome.scan_id
        task = asyncio.create_task(self.execute(scan_id))
        self._tasks[scan_id] = task
        task.add_done_callback(lambda _: self._tasks.pop(scan_id, None))
        return outcome

    def running(self) -> List[str]:
        return list(self._tasks)

    async def wait(self, scan_id: str) -> ScanOutcome:
        # finished tasks are dropped, the store holds the final outcome
        task = self._tasks.get(scan_id)
        if task is not None:
            await task
        return self.get_scan(scan_id)

