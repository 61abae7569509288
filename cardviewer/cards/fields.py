"""Extraction of ``field: value`` lines from card block text.

Lines are scanned one at a time, so colons inside values or in unrelated
prose elsewhere in the block never confuse the extraction.
"""

import math
import re
from typing import Optional

# Leading decimal number, as a lenient float parser reads it ("148 min" -> 148)
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def extract_field(content: str, field: str) -> Optional[str]:
    """Return the value of the first ``field:`` line in ``content``.

    Args:
        content: Raw block text
        field: Field name, matched literally at the start of a line

    Returns:
        The trimmed value, or None if the field is missing or empty
    """
    pattern = re.compile(rf"^{re.escape(field)}:\s*(.*)$")
    for line in (content or "").split("\n"):
        match = pattern.match(line)
        if match:
            value = match.group(1).strip()
            return value or None
    return None


def parse_number(value: Optional[str]) -> Optional[float]:
    """Parse the leading number of ``value``; None if there isn't one."""
    if not value:
        return None
    match = _NUMBER_PREFIX.match(value.strip())
    if not match:
        return None
    try:
        number = float(match.group(0))
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def extract_number(content: str, field: str) -> Optional[float]:
    """Extract ``field`` and parse it as a float.

    Never raises and never returns NaN: a missing field or an unparseable
    value both come back as None.
    """
    return parse_number(extract_field(content, field))
