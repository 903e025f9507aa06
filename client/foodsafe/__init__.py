"""
foodsafe: client-side result normalization for the food safety lookup service.
"""
from foodsafe.client import SafetyClient
from foodsafe.errors import (
    FailureKind,
    LookupFailure,
    RequestTimeout,
    NetworkFailure,
    ServerError,
    ShapeMismatch,
    NotFound,
    IncompleteData,
)
from foodsafe.models.verdict import Verdict, SafetyItem
from foodsafe.models.resolve import ResolveHit, ResolveResponse

__all__ = [
    "SafetyClient",
    "FailureKind",
    "LookupFailure",
    "RequestTimeout",
    "NetworkFailure",
    "ServerError",
    "ShapeMismatch",
    "NotFound",
    "IncompleteData",
    "Verdict",
    "SafetyItem",
    "ResolveHit",
    "ResolveResponse",
]
