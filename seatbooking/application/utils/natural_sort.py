from __future__ import annotations

import re

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(value: str | int | None) -> tuple[str | int, ...]:
    """
    Sort key that compares digit runs numerically and text case-insensitively.

    "A9" < "A10", "a2" == "A2". re.split with a capture group always yields text at
    even positions and digits at odd positions, so keys never compare str with int.
    """
    parts = _DIGITS.split(str(value or ""))
    return tuple(int(part) if index % 2 else part.casefold() for index, part in enumerate(parts))
