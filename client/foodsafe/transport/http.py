"""
HTTP POST helpers for the lookup backend (httpx, async).
One AsyncClient per call: this layer owns no connection pool.
"""
import logging
from typing import Any, Optional

import httpx

from foodsafe.transport.deadline import run_with_deadline

logger = logging.getLogger(__name__)


def _join(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


async def _post(
    url: str,
    deadline: float,
    transport: Optional[httpx.AsyncBaseTransport],
    **request_kwargs: Any,
) -> Any:
    async def issue() -> Any:
        # Client timeout disabled: the deadline race is the only clock
        async with httpx.AsyncClient(timeout=None, transport=transport) as client:
            resp = await client.post(url, headers={"Accept": "application/json"}, **request_kwargs)
            if not resp.is_success:
                await resp.aread()
                logger.warning("HTTP %s url=%s body=%s", resp.status_code, url, resp.text[:120])
                resp.raise_for_status()
            return resp.json()

    logger.debug("HTTP POST url=%s deadline=%ss", url, deadline)
    return await run_with_deadline(issue, deadline)


async def post_json(
    base_url: str,
    path: str,
    body: dict,
    deadline: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """POST a JSON body; return the decoded JSON response."""
    return await _post(_join(base_url, path), deadline, transport, json=body)


async def post_multipart(
    base_url: str,
    path: str,
    field: str,
    filename: str,
    content: bytes,
    content_type: str,
    deadline: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Any:
    """POST one file as multipart/form-data; return the decoded JSON response."""
    files = {field: (filename, content, content_type)}
    return await _post(_join(base_url, path), deadline, transport, files=files)
