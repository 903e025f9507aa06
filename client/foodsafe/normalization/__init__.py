"""
Response normalizers: backend payload in, ordered list of SafetyItem out.
"""
from .image import normalize_image_response
from .text import normalize_text_response, parse_resolve_response, TextResolution
from .barcode import normalize_barcode_response

__all__ = [
    "normalize_image_response",
    "normalize_text_response",
    "parse_resolve_response",
    "TextResolution",
    "normalize_barcode_response",
]
