"""portfolio_assistant/classifier.py

Heuristic screen for degenerate model replies: error text, version strings,
changelog fragments and similar output that is present but not an answer.
The checks are deliberately broad; a false positive only costs a generic
apology.
"""

from __future__ import annotations

# Standard Library
import re
from typing import Callable, NamedTuple


class DegeneracyCheck(NamedTuple):
    reason: str
    matches: Callable[[str], bool]


def _pattern(regex: str, flags: int = 0) -> Callable[[str], bool]:
    compiled = re.compile(regex, flags)
    return lambda text: compiled.search(text) is not None


# Evaluated in order; the first hit names the reason.
CHECKS: tuple[DegeneracyCheck, ...] = (
    DegeneracyCheck("apology", _pattern(r"i(?:'m|’m| am) sorry, i couldn(?:'|’)t generate", re.IGNORECASE)),
    DegeneracyCheck("version", _pattern(r"\d+\.\d+\.\d+")),
    DegeneracyCheck("features", _pattern(r"features", re.IGNORECASE)),
    DegeneracyCheck("init_prefix", _pattern(r"init:", re.IGNORECASE)),
    DegeneracyCheck("error", _pattern(r"error", re.IGNORECASE)),
    DegeneracyCheck("commit_hash", _pattern(r"\(\w+\)\s*$")),
)


def classify(text: str) -> str | None:
    """Return the reason code of the first check ``text`` trips, else None."""
    for check in CHECKS:
        if check.matches(text):
            return check.reason
    return None


def is_degenerate(text: str) -> bool:
    """True when any check flags ``text``."""
    return classify(text) is not None
