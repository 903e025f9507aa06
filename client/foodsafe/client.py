"""
Entry operations called by the mobile screens.

    classify_image(uri)     POST /classify/resolve (multipart)   -> [SafetyItem]
    resolve_text(text)      POST /ingredients/resolve            -> TextResolution
    resolve_barcode(code)   POST /barcode/resolve                -> [product, SafetyItem...]
    resolve_tokens(tokens)  POST /ingredients/resolve-tokens     -> [ResolveHit]

Each call issues one request under a deadline, normalizes the payload and
either returns the full result or raises exactly one LookupFailure.
Nothing is cached or retried; calls share no state and may run concurrently.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, List, Optional, TypeVar
from urllib.parse import unquote, urlparse

import httpx

from foodsafe import config
from foodsafe.errors import classify_failure
from foodsafe.models.resolve import ResolveHit
from foodsafe.models.verdict import SafetyItem
from foodsafe.normalization.barcode import normalize_barcode_response
from foodsafe.normalization.image import normalize_image_response
from foodsafe.normalization.text import TextResolution, normalize_text_response, parse_resolve_response
from foodsafe.transport.http import post_json, post_multipart

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _local_path(uri: str) -> Path:
    """Accept a plain path or a file:// URI (what the image picker hands back)."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


class SafetyClient:
    def __init__(
        self,
        api_base: Optional[str] = None,
        default_timeout: Optional[float] = None,
        image_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = (api_base or config.get_api_base()).rstrip("/")
        self.default_timeout = default_timeout or config.get_default_timeout()
        self.image_timeout = image_timeout or config.get_image_timeout()
        self._transport = transport  # tests inject httpx.MockTransport

    async def _guarded(self, operation: str, run: Callable[[], Awaitable[T]]) -> T:
        try:
            return await run()
        except Exception as e:
            failure = classify_failure(e, operation)
            if failure is e:
                raise
            raise failure from e

    async def classify_image(self, uri: str) -> List[SafetyItem]:
        async def run() -> List[SafetyItem]:
            content = await asyncio.to_thread(_local_path(uri).read_bytes)
            logger.info("CLASSIFY_IMAGE upload bytes=%d url=%s", len(content), self.api_base + config.CLASSIFY_IMAGE_PATH)
            payload = await post_multipart(
                self.api_base,
                config.CLASSIFY_IMAGE_PATH,
                config.IMAGE_FIELD,
                config.IMAGE_FILENAME,
                content,
                config.IMAGE_CONTENT_TYPE,
                deadline=self.image_timeout,
                transport=self._transport,
            )
            return normalize_image_response(payload)

        return await self._guarded("classify_image", run)

    async def resolve_text(self, text: str) -> TextResolution:
        trimmed = (text or "").strip()
        if not trimmed:
            return TextResolution()

        async def run() -> TextResolution:
            payload = await post_json(
                self.api_base,
                config.RESOLVE_TEXT_PATH,
                {"ingredients_text": trimmed},
                deadline=self.default_timeout,
                transport=self._transport,
            )
            return normalize_text_response(payload)

        return await self._guarded("resolve_text", run)

    async def resolve_barcode(self, code: str) -> List[SafetyItem]:
        barcode = code or ""

        async def run() -> List[SafetyItem]:
            logger.info("RESOLVE_BARCODE barcode=%r", barcode)
            payload = await post_json(
                self.api_base,
                config.RESOLVE_BARCODE_PATH,
                {"barcode": barcode},
                deadline=self.default_timeout,
                transport=self._transport,
            )
            return normalize_barcode_response(payload, barcode)

        return await self._guarded("resolve_barcode", run)

    async def resolve_tokens(self, tokens: Iterable[str]) -> List[ResolveHit]:
        token_list = list(tokens)

        async def run() -> List[ResolveHit]:
            payload: Any = await post_json(
                self.api_base,
                config.RESOLVE_TOKENS_PATH,
                {"tokens": token_list},
                deadline=self.default_timeout,
                transport=self._transport,
            )
            hits = parse_resolve_response(payload).hits
            logger.info("RESOLVE_TOKENS tokens=%d hits=%d", len(token_list), len(hits))
            return hits

        return await self._guarded("resolve_tokens", run)
