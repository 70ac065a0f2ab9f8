class A11yScanError(Exception):
    """Base class for errors raised by the scanning engine."""


class SourceError(A11yScanError):
    """A collaborator could not supply findings or page metrics."""


class ScanFailedError(A11yScanError):
    def __init__(self, scan_id: str, reason: str):
        super().__init__(f"scan {scan_id} failed: {reason}")
        self.scan_id = scan_id
        self.reason = reason


class ScanNotFoundError(A11yScanError, KeyError):
    def __init__(self, scan_id: str):
        super().__init__(f"scan {scan_id} not found")
        self.scan_id = scan_id

    def __str__(self) -> str:
        return f"scan {self.scan_id} not found"


class InvalidScanStateError(A11yScanError):
    def __init__(self, scan_id: str, current: str, requested: str):
        super().__init__(f"scan {scan_id}: cannot move from {current} to {requested}")
        self.scan_id = scan_id
        self.current = current
        self.requested = requested
