import logging
from typing import Any, List, Optional, Sequence
import httpx
from pydantic import ValidationError
from a11yscan.core.config import Settings, get_settings
from a11yscan.core.errors import SourceError
from a11yscan.core.http import client_for
from a11yscan.models.schemas import PageMetrics, RawFinding
from a11yscan.sources.axe import parse_axe_results

logger = logging.getLogger(__name__)


class _RemoteSource:
    def __init__(self, endpoint: str, settings: Optional[Settings] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.endpoint = endpoint
        self.settings = settings or get_settings()
        self.transport = transport

    async def _post(self, payload: dict) -> Any:
        try:
            async with client_for(self.settings, transport=self.transport) as client:
                r = await client.post(self.endpoint, json=payload)
                r.raise_for_status()
                return r.json()
        except httpx.HTTPStatusError as e:
            raise SourceError(f"{self.endpoint} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceError(f"{self.endpoint} unreachable: {e!r}") from e
        except ValueError as e:
            raise SourceError(f"{self.endpoint} returned invalid JSON") from e


class HttpFindingSource(_RemoteSource):
    """Asks a rule-checking service to audit ``url`` with the given rule tags.

    The service may answer with a bare list of violations or with the full
    axe-core result object.
    """

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "HttpFindingSource":
        settings = settings or get_settings()
        if not settings.findings_url:
            raise SourceError("A11YSCAN_FINDINGS_URL is not configured")
        return cls(settings.findings_url, settings)

    async def fetch_findings(self, url: str, tags: Sequence[str]) -> List[RawFinding]:
        logger.debug("requesting findings for %s with tags %s", url, list(tags))
        body = await self._post({"url": url, "tags": list(tags)})
        if isinstance(body, list):
            body = {"violations": body}
        return parse_axe_results(body)


class HttpMetricsSource(_RemoteSource):
    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "HttpMetricsSource":
        settings = settings or get_settings()
        if not settings.metrics_url:
            raise SourceError("A11YSCAN_METRICS_URL is not configured")
        return cls(settings.metrics_url, settings)

    async def fetch_metrics(self, url: str) -> PageMetrics:
        logger.debug("requesting page metrics for %s", url)
        body = await self._post({"url": url})
        try:
            return PageMetrics.model_validate(body)
        except ValidationError as e:
            raise SourceError(f"malformed page metrics from {self.endpoint}: {e}") from e
