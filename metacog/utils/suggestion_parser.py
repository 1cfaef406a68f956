"""Split a judge's improvement list into individual suggestions."""

from __future__ import annotations

import re

# A new item starts with "1. ", "- " or "* " once the line is trimmed.
_ITEM_MARKER = re.compile(r"^(\d+\.|-|\*)\s")


def parse_suggestions(text: str) -> list[str]:
    """Parse a numbered or bulleted list into ordered suggestion strings.

    Continuation lines are folded into the item above them (joined by
    newlines), blank lines are dropped, and markers stay in the item text.
    Text with no markers at all comes back as a single suggestion; empty
    text gives an empty list.
    """
    suggestions: list[str] = []
    current: list[str] = []

    for line in (text or "").splitlines():
        trimmed = line.strip()

        if current and _ITEM_MARKER.match(trimmed):
            suggestions.append("\n".join(current).strip())
            current = []

        if trimmed:
            current.append(trimmed)

    if current:
        suggestions.append("\n".join(current).strip())

    return suggestions
