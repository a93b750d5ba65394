from __future__ import annotations

from typing import Dict, Iterable

from .models import Failure, ProviderOutcome, Skipped, Success


def compose(outcomes: Iterable[ProviderOutcome]) -> str:
    return "\n".join(outcome.text for outcome in outcomes if isinstance(outcome, Success))


def summarize(outcomes: Iterable[ProviderOutcome]) -> Dict[str, int]:
    counts = {"success": 0, "failure": 0, "skipped": 0}
    for outcome in outcomes:
        if isinstance(outcome, Success):
            counts["success"] += 1
        elif isinstance(outcome, Failure):
            counts["failure"] += 1
        elif isinstance(outcome, Skipped):
            counts["skipped"] += 1
    return counts
