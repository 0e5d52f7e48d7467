"""
Row identifier policy.

Every row derived from a document carries that document's ``id`` parsed as a
signed 64-bit integer. Ids that are not plain integers (optional sign, ASCII
digits, no whitespace) or that do not fit in BIGINT map to ``SENTINEL_ROW_ID``.
"""

import re
from typing import Optional

SENTINEL_ROW_ID = -1

BIGINT_MIN = -(2 ** 63)
BIGINT_MAX = 2 ** 63 - 1

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def try_parse_row_id(raw_id: str) -> Optional[int]:
    """Parse a document id, returning None when it is not a BIGINT"""
    if not _INTEGER_PATTERN.fullmatch(raw_id):
        return None
    value = int(raw_id)
    if not BIGINT_MIN <= value <= BIGINT_MAX:
        return None
    return value
