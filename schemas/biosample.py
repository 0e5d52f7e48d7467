"""
Pydantic schemas for biosample documents, decoded sub-structures and sink rows
"""

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from typing import Optional, Dict, Any, Union


class ResidualModel(BaseModel):
    """
    Base for loosely-typed source shapes.

    Unknown keys are kept (``extra="allow"``) and exposed through
    ``residual`` for schema-drift diagnostics. They are never persisted.
    """

    model_config = ConfigDict(extra="allow")

    @property
    def residual(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class BiosampleDocument(ResidualModel):
    """
    One source document.

    ``Attributes`` and ``Package`` are kept as raw values: their structure is
    checked link by link by the flattener, not here.
    """

    id: str = ""
    attributes: Any = Field(None, alias="Attributes")
    package: Any = Field(None, alias="Package")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Identifier is text; numbers are stringified and null becomes empty"""
        if v is None:
            return ""
        if isinstance(v, str):
            return v
        return str(v)


class AttributeData(ResidualModel):
    """One element of ``Attributes.Attribute``"""

    content: Optional[StrictStr] = None
    attribute_name: Optional[StrictStr] = None
    harmonized_name: Optional[StrictStr] = None
    display_name: Optional[StrictStr] = None
    unit: Optional[StrictStr] = None


class PackageData(ResidualModel):
    """A document's ``Package`` sub-structure"""

    content: Optional[StrictStr] = None
    display_name: Optional[StrictStr] = None


class AttributeRow(BaseModel):
    """
    Row of the ``attribute`` table.

    Field order matches the table's column order.
    """

    content: str = ""
    attribute_name: str = ""
    id: int
    harmonized_name: str = ""
    display_name: str = ""
    unit: str = ""

    @classmethod
    def from_decoded(cls, attribute: AttributeData, row_id: int) -> "AttributeRow":
        """Build a row, defaulting absent text fields to empty string"""
        return cls(
            content=attribute.content or "",
            attribute_name=attribute.attribute_name or "",
            id=row_id,
            harmonized_name=attribute.harmonized_name or "",
            display_name=attribute.display_name or "",
            unit=attribute.unit or "",
        )


class PackageRow(BaseModel):
    """Row of the ``package`` table"""

    content: str = ""
    display_name: str = ""
    id: int

    @classmethod
    def from_decoded(cls, package: PackageData, row_id: int) -> "PackageRow":
        return cls(
            content=package.content or "",
            display_name=package.display_name or "",
            id=row_id,
        )


SinkRow = Union[AttributeRow, PackageRow]
