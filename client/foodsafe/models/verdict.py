"""
Safety verdicts and the normalized item shown on a result card.
Single format for image, text and barcode lookups.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Verdict(str, Enum):
    SAFE = "SAFE"
    CAUTION = "CAUTION"
    UNSAFE = "UNSAFE"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @classmethod
    def parse(cls, value: Any) -> "Verdict":
        """Strict parse of a backend status string. No case folding, no coercion."""
        if isinstance(value, Verdict):
            return value
        if not isinstance(value, str):
            raise ValueError(f"verdict must be a string, got {type(value).__name__}")
        try:
            return cls(value.strip())
        except ValueError:
            raise ValueError(f"unrecognized verdict {value!r}") from None


_SEVERITY = {
    Verdict.SAFE: 0,
    Verdict.CAUTION: 1,
    Verdict.UNSAFE: 2,
}


@dataclass
class SafetyItem:
    verdict: Verdict
    display_label: Optional[str] = None   # raw token, model label or barcode
    canonical_name: Optional[str] = None  # resolved food or product name
    confidence: Optional[float] = None
    rationale: Optional[str] = None
    sources: list[str] = field(default_factory=list)  # citation order is meaningful
    is_aggregate: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.verdict, Verdict):
            raise ValueError(f"verdict must be a Verdict, got {self.verdict!r}")
        if not (self.display_label or "").strip() and not (self.canonical_name or "").strip():
            raise ValueError("item needs a label or a name")

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.display_label,
            "name": self.canonical_name,
            "det_conf": self.confidence,
            "final_status": self.verdict.value,
            "rationale": self.rationale,
            "sources": list(self.sources),
            "isProduct": self.is_aggregate,
        }
