"""Turn free-form judge text into a score in [0, 1].

Judges answer in prose ("Score: 0.82. The response...", "I rate this as
0.7", "accuracy is roughly 0.9"), so extraction runs in two passes:

1. A labeled score ("score", "rating" or "rate", optionally followed by
   "of", "as", "is" or ":") wins and is clamped to [0, 1]. Integers are
   accepted here, so "rating of 1" is 1.0 and "score: 8" clamps to 1.0.
2. Otherwise the first unsigned decimal (``\\d+\\.\\d+``) is used only when it
   already lies in [0, 1]. An out-of-range decimal is rejected, not clamped.
3. Nothing usable: ``NEUTRAL_SCORE``. This means "the judge did not say",
   not "the response is mediocre".

The clamp in pass 1 and the reject in pass 2 are asymmetric on purpose.
Labels are not word-anchored either, so "accurate 5" reads as "rate 5".
See DESIGN.md before changing any of this.
"""

from __future__ import annotations

import re

NEUTRAL_SCORE = 0.5

_LABELED_SCORE = re.compile(
    r"(?:score|rating|rate)(?:\s*(?:of|as|is|:))?\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)
_BARE_DECIMAL = re.compile(r"\d+\.\d+")


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def extract_score(text: str) -> float:
    """Extract a [0, 1] score from judge text (see module docstring)."""
    if not text:
        return NEUTRAL_SCORE

    match = _LABELED_SCORE.search(text)
    if match:
        return _clamp(float(match.group(1)))

    match = _BARE_DECIMAL.search(text)
    if match:
        value = float(match.group(0))
        if 0.0 <= value <= 1.0:
            return value

    return NEUTRAL_SCORE
