"""
Image classification payloads. The classifier endpoint has shipped several
response shapes; each known shape is tried in priority order and the first
structural match wins. A payload matching none of them yields no items.

Records are independent: a malformed record is dropped and logged, the rest
of the batch is kept.
"""
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from foodsafe.models.verdict import Verdict, SafetyItem

logger = logging.getLogger(__name__)

# Ordered fallbacks for loose candidate records (first non-empty wins)
CANDIDATE_NAME_FIELDS: Tuple[str, ...] = ("canonical_name", "name", "label")
CANDIDATE_STATUS_FIELDS: Tuple[str, ...] = ("status", "default_status")
CANDIDATE_CONFIDENCE_FIELDS: Tuple[str, ...] = ("det_conf", "confidence", "score")
CANDIDATE_RATIONALE_FIELDS: Tuple[str, ...] = ("rationale", "notes")


def _first_present(record: dict, fields: Sequence[str]) -> Any:
    for f in fields:
        value = record.get(f)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"expected string, got {type(value).__name__}")
    return value.strip() or None


def _opt_score(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected number, got {type(value).__name__}")
    return float(value)


def _opt_flag(value: Any) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"expected boolean, got {type(value).__name__}")
    return value


def _sources(value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        raise ValueError("sources must be a list of strings")
    return list(value)


def _item_from_record(record: Any) -> SafetyItem:
    """Already-normalized record: label, name, det_conf, final_status, ..."""
    if not isinstance(record, dict):
        raise ValueError(f"record must be an object, got {type(record).__name__}")
    return SafetyItem(
        verdict=Verdict.parse(record.get("final_status")),
        display_label=_opt_str(record.get("label")),
        canonical_name=_opt_str(record.get("name")),
        confidence=_opt_score(record.get("det_conf")),
        rationale=_opt_str(record.get("rationale")),
        sources=_sources(record.get("sources")),
        is_aggregate=_opt_flag(record.get("isProduct")),
    )


def _item_from_candidate(record: Any) -> SafetyItem:
    """Loose classifier candidate: name and status come from fallback field lists."""
    if not isinstance(record, dict):
        raise ValueError(f"candidate must be an object, got {type(record).__name__}")
    status = _first_present(record, CANDIDATE_STATUS_FIELDS)
    if status is None:
        raise ValueError("candidate has no status")
    return SafetyItem(
        verdict=Verdict.parse(status),
        display_label=_opt_str(record.get("label")),
        canonical_name=_opt_str(_first_present(record, CANDIDATE_NAME_FIELDS)),
        confidence=_opt_score(_first_present(record, CANDIDATE_CONFIDENCE_FIELDS)),
        rationale=_opt_str(_first_present(record, CANDIDATE_RATIONALE_FIELDS)),
        sources=_sources(record.get("sources")),
    )


def _bare_list(payload: Any) -> Optional[list]:
    return payload if isinstance(payload, list) else None


def _items_object(payload: Any) -> Optional[list]:
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        return payload["items"]
    return None


def _candidates_object(payload: Any) -> Optional[list]:
    if isinstance(payload, dict) and isinstance(payload.get("candidates"), list):
        return payload["candidates"]
    return None


# (shape name, extractor, record decoder) in priority order
ImageShape = Tuple[str, Callable[[Any], Optional[list]], Callable[[Any], SafetyItem]]
IMAGE_SHAPES: Tuple[ImageShape, ...] = (
    ("items_list", _bare_list, _item_from_record),
    ("items_object", _items_object, _item_from_record),
    ("candidates_object", _candidates_object, _item_from_candidate),
)


def normalize_image_response(payload: Any) -> List[SafetyItem]:
    """Decode an image classification payload into SafetyItems (possibly empty)."""
    for shape, extract, decode in IMAGE_SHAPES:
        records = extract(payload)
        if records is None:
            continue
        items: List[SafetyItem] = []
        dropped = 0
        for idx, record in enumerate(records):
            try:
                items.append(decode(record))
            except ValueError as e:
                dropped += 1
                logger.info("CLASSIFY_IMAGE dropped record shape=%s index=%d reason=%s", shape, idx, e)
        logger.info("CLASSIFY_IMAGE shape=%s items=%d dropped=%d", shape, len(items), dropped)
        return items

    logger.info("CLASSIFY_IMAGE unrecognized payload type=%s; no items", type(payload).__name__)
    return []
