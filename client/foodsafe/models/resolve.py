"""
Backend records returned by the ingredient resolver (text, tokens, barcode).
Validated with pydantic; never handed to the UI directly.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from foodsafe.models.verdict import Verdict, SafetyItem


class ResolveHit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: Optional[str] = None
    food_id: Optional[int] = None
    name: Optional[str] = None
    status: Verdict
    match_type: Optional[str] = None  # how the backend matched the token (exact, alias, fuzzy...)
    db_score: Optional[float] = None
    notes: Optional[str] = None
    sources: Optional[List[str]] = None

    @field_validator("status", mode="before")
    @classmethod
    def _strict_status(cls, v):
        return Verdict.parse(v)

    def to_item(self) -> SafetyItem:
        return SafetyItem(
            verdict=self.status,
            display_label=self.token,
            canonical_name=self.name,
            confidence=self.db_score,
            rationale=self.notes,
            sources=list(self.sources or []),
        )


class ResolveResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hits: List[ResolveHit]
    overall_status: Optional[Verdict] = None

    @field_validator("overall_status", mode="before")
    @classmethod
    def _strict_overall(cls, v):
        if v is None:
            return None
        return Verdict.parse(v)
