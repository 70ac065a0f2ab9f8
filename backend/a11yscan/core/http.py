import httpx
from contextlib import asynccontextmanager
from typing import Optional
from a11yscan.core.config import Settings, get_settings


def timeout_for(settings: Settings) -> httpx.Timeout:
    return httpx.Timeout(settings.http_timeout, connect=settings.connect_timeout)


@asynccontextmanager
async def client_for(settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
    settings = settings or get_settings()
    async with httpx.AsyncClient(
        timeout=timeout_for(settings),
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        follow_redirects=True,
        transport=transport,
    ) as client:
        yield client
