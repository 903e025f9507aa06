"""
Barcode resolution. The backend reports "not found" and "no ingredients"
inside a 200 body via an `error` code; those map to NotFound/IncompleteData.
A successful lookup becomes one product summary card followed by one card
per ingredient, in backend order.
"""
import logging
from typing import Any, List

from foodsafe.errors import IncompleteData, NotFound, ShapeMismatch
from foodsafe.evaluation.aggregation import worst_verdict
from foodsafe.models.verdict import SafetyItem
from foodsafe.normalization.text import hits_to_items, parse_resolve_response

logger = logging.getLogger(__name__)

ERROR_BARCODE_NOT_FOUND = "barcode_not_found"
ERROR_INGREDIENTS_MISSING = "ingredients_missing"
PRODUCT_PLACEHOLDER_NAME = "Scanned product"


def _backend_message(payload: dict) -> Any:
    msg = payload.get("message")
    return msg if isinstance(msg, str) else None


def _product_rationale(count: int, raw_ingredients: Any) -> str:
    noun = "ingredient" if count == 1 else "ingredients"
    text = f"Found {count} {noun} on this product."
    if isinstance(raw_ingredients, str) and raw_ingredients.strip():
        text += f" Label ingredients: {raw_ingredients.strip()}"
    return text


def normalize_barcode_response(payload: Any, barcode: str) -> List[SafetyItem]:
    if not isinstance(payload, dict):
        raise ShapeMismatch(f"expected object, got {type(payload).__name__}")

    error = payload.get("error")
    if error == ERROR_BARCODE_NOT_FOUND:
        logger.info("RESOLVE_BARCODE not_found barcode=%s", barcode)
        raise NotFound(_backend_message(payload))
    if error == ERROR_INGREDIENTS_MISSING:
        logger.info("RESOLVE_BARCODE ingredients_missing barcode=%s", barcode)
        raise IncompleteData(_backend_message(payload))

    response = parse_resolve_response(payload)
    items = hits_to_items(response)
    if not items:
        logger.info("RESOLVE_BARCODE no_hits barcode=%s", barcode)
        raise IncompleteData()

    overall = response.overall_status or worst_verdict(i.verdict for i in items)

    display_name = payload.get("display_name")
    name = display_name.strip() if isinstance(display_name, str) else ""
    product = SafetyItem(
        verdict=overall,
        display_label=barcode,
        canonical_name=name or PRODUCT_PLACEHOLDER_NAME,
        rationale=_product_rationale(len(items), payload.get("raw_ingredients")),
        is_aggregate=True,
    )
    logger.info(
        "RESOLVE_BARCODE barcode=%s product=%s hits=%d overall=%s derived=%s",
        barcode, product.canonical_name, len(items), overall.value,
        response.overall_status is None,
    )
    return [product] + items
