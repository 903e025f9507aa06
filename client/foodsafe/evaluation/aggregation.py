"""
Overall verdict for a product: the most severe verdict among its ingredients.
UNSAFE > CAUTION > SAFE.
"""
from typing import Iterable

from foodsafe.models.verdict import Verdict


def worst_verdict(verdicts: Iterable[Verdict]) -> Verdict:
    """Return the most severe verdict. Empty input is the caller's problem (IncompleteData)."""
    worst = None
    for v in verdicts:
        if worst is None or v.severity > worst.severity:
            worst = v
            if worst is Verdict.UNSAFE:
                break
    if worst is None:
        raise ValueError("worst_verdict() needs at least one verdict")
    return worst
