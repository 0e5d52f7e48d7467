"""
Flatten biosample documents into attribute and package rows
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

from core.exceptions import ShapeMismatchError
from ingestion.diagnostics import Diagnostics
from ingestion.transformers.decoder import decode_attribute, decode_package
from ingestion.transformers.row_id import SENTINEL_ROW_ID, try_parse_row_id
from models.base import RowShape, StructuralAbsence
from schemas.biosample import AttributeRow, BiosampleDocument, PackageRow, SinkRow

ATTRIBUTE_ARRAY_KEY = "Attribute"


class Flattener:
    """
    Turn one document into zero or more sink rows.

    Handles:
    - Package path: at most one PackageRow per document
    - Attribute path: one AttributeRow per decodable array element
    - Fault isolation per element (a bad element never drops its siblings)
    - Row identifier assignment (document id, sentinel -1 on parse failure)

    Rows are yielded in emission order: the package row first, then the
    attribute rows in their original array order.
    """

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self.diagnostics = diagnostics or Diagnostics(enabled=False)

    def flatten(self, raw_document: Dict[str, Any]) -> Iterator[SinkRow]:
        document = BiosampleDocument.model_validate(raw_document)

        row_id = try_parse_row_id(document.id)
        if row_id is None:
            self.diagnostics.id_parse_failure(document.id)
            row_id = SENTINEL_ROW_ID

        yield from self._flatten_package(document, row_id)
        yield from self._flatten_attributes(document, row_id)

    def _flatten_package(self, document: BiosampleDocument, row_id: int) -> Iterator[PackageRow]:
        if document.package is None:
            self.diagnostics.structural_absence(document.id, StructuralAbsence.PACKAGE_MISSING)
            return

        try:
            package = decode_package(document.package)
        except ShapeMismatchError as e:
            self.diagnostics.decode_failure(document.id, e)
            return

        self.diagnostics.residual_fields(document.id, RowShape.PACKAGE, package.residual)
        yield PackageRow.from_decoded(package, row_id)

    def _flatten_attributes(self, document: BiosampleDocument, row_id: int) -> Iterator[AttributeRow]:
        elements = self._locate_attribute_array(document)
        if elements is None:
            return

        self.diagnostics.attribute_count(document.id, len(elements))

        for element in elements:
            try:
                attribute = decode_attribute(element)
            except ShapeMismatchError as e:
                self.diagnostics.decode_failure(document.id, e)
                continue

            self.diagnostics.residual_fields(document.id, RowShape.ATTRIBUTE, attribute.residual)
            yield AttributeRow.from_decoded(attribute, row_id)

    def _locate_attribute_array(self, document: BiosampleDocument) -> Optional[list]:
        """
        Walk ``Attributes`` -> ``Attribute`` -> list.

        Each broken link is reported as its own StructuralAbsence and ends
        the attribute path with no rows.
        """
        container: Any = document.attributes
        if container is None:
            absence = StructuralAbsence.ATTRIBUTES_MISSING
        elif not isinstance(container, Mapping):
            absence = StructuralAbsence.ATTRIBUTES_NOT_OBJECT
        elif ATTRIBUTE_ARRAY_KEY not in container:
            absence = StructuralAbsence.ATTRIBUTE_KEY_MISSING
        elif not isinstance(container[ATTRIBUTE_ARRAY_KEY], list):
            absence = StructuralAbsence.ATTRIBUTE_NOT_ARRAY
        else:
            return container[ATTRIBUTE_ARRAY_KEY]

        self.diagnostics.structural_absence(document.id, absence)
        return None
