"""
Free-text ingredient resolution: {hits: [...], overall_status}.
Strict: a missing or non-list `hits` is a shape mismatch.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from foodsafe.errors import ShapeMismatch
from foodsafe.models.resolve import ResolveResponse
from foodsafe.models.verdict import Verdict, SafetyItem

logger = logging.getLogger(__name__)


@dataclass
class TextResolution:
    """Items in backend order plus the backend's overall verdict (display only)."""
    items: List[SafetyItem] = field(default_factory=list)
    overall_status: Optional[Verdict] = None

    def __iter__(self) -> Iterator[SafetyItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]


def parse_resolve_response(payload: Any) -> ResolveResponse:
    """Validate a resolver payload. Raises ShapeMismatch if it is not {hits: [...]}."""
    if not isinstance(payload, dict):
        raise ShapeMismatch(f"expected object, got {type(payload).__name__}")
    if not isinstance(payload.get("hits"), list):
        raise ShapeMismatch("missing or non-list 'hits'")
    try:
        return ResolveResponse.model_validate(payload)
    except ValueError as e:
        raise ShapeMismatch(f"invalid resolver payload: {e}") from e


def hits_to_items(response: ResolveResponse) -> List[SafetyItem]:
    try:
        return [hit.to_item() for hit in response.hits]
    except ValueError as e:
        raise ShapeMismatch(f"unusable hit: {e}") from e


def normalize_text_response(payload: Any) -> TextResolution:
    response = parse_resolve_response(payload)
    items = hits_to_items(response)
    logger.info(
        "RESOLVE_TEXT hits=%d overall=%s",
        len(items), response.overall_status.value if response.overall_status else None,
    )
    return TextResolution(items=items, overall_status=response.overall_status)
