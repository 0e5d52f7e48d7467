"""
Pydantic schemas for data validation and serialization.

This package defines the Pydantic models used across the flattening
pipeline:

Schemas:
    biosample: Source document, decoded sub-structures and sink rows

Features:
    - Strict text decoding of the known attribute/package fields
    - Residual (unknown key) capture for schema-drift diagnostics
    - Empty-string defaulting at row construction

Usage:
    from schemas.biosample import BiosampleDocument, AttributeData, AttributeRow

Example:
    attribute = AttributeData.model_validate({"content": "5", "attribute_name": "age"})
    row = AttributeRow.from_decoded(attribute, row_id=123)

    assert row.unit == ""
    assert row.id == 123
"""

__all__ = [
    "BiosampleDocument",
    "AttributeData",
    "PackageData",
    "AttributeRow",
    "PackageRow",
    "SinkRow",
]
