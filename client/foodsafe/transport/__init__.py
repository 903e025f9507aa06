"""
Transport wrapper: one HTTP request per call, bounded by a deadline.
"""
from .deadline import run_with_deadline
from .http import post_json, post_multipart

__all__ = [
    "run_with_deadline",
    "post_json",
    "post_multipart",
]
