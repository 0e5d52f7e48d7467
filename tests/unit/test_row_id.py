"""
Unit tests for the row identifier policy
"""

import pytest
from ingestion.transformers.flattener import Flattener
from ingestion.transformers.row_id import (
    BIGINT_MAX,
    BIGINT_MIN,
    SENTINEL_ROW_ID,
    try_parse_row_id,
)


class TestRowIdPolicy:
    """Document id -> BIGINT row id, sentinel on failure"""
    
    @pytest.mark.parametrize("raw_id, expected", [
        ("123", 123),
        ("0", 0),
        ("+42", 42),
        ("-17", -17),
        ("007", 7),
        (str(BIGINT_MAX), BIGINT_MAX),
        (str(BIGINT_MIN), BIGINT_MIN),
    ])
    def test_parses_integers(self, raw_id, expected):
        assert try_parse_row_id(raw_id) == expected
    
    @pytest.mark.parametrize("raw_id", [
        "abc",
        "",
        " 12",
        "12 ",
        "1.5",
        "1_000",
        "SAMN123",
        "١٢٣",  # non-ASCII digits
        str(BIGINT_MAX + 1),
        str(BIGINT_MIN - 1),
    ])
    def test_invalid_ids_get_sentinel_row_id(self, raw_id):
        assert try_parse_row_id(raw_id) is None
        rows = list(Flattener().flatten({"id": raw_id, "Package": {"content": "P"}}))
        assert rows[0].id == SENTINEL_ROW_ID
    
    def test_sentinel_value(self):
        assert SENTINEL_ROW_ID == -1
