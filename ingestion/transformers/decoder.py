"""
Shape decoder: strict structural decoding of nested sub-documents.

Pure functions, no I/O. A value decodes when it is a mapping whose known
fields are either absent, null, or strings. Anything else raises
``ShapeMismatchError``; missing optional fields never do.
"""

from collections.abc import Mapping
from typing import Any, Dict, Type, Union

from pydantic import ValidationError

from core.exceptions import ShapeMismatchError
from models.base import RowShape
from schemas.biosample import AttributeData, PackageData, ResidualModel

SHAPE_MODELS: Dict[RowShape, Type[ResidualModel]] = {
    RowShape.ATTRIBUTE: AttributeData,
    RowShape.PACKAGE: PackageData,
}


def decode_shape(raw: Any, shape: RowShape) -> Union[AttributeData, PackageData]:
    """
    Decode ``raw`` against ``shape``.

    Returns:
        The decoded model; unknown keys are available on ``.residual``

    Raises:
        ShapeMismatchError: ``raw`` is not an object, or a known field has
            a non-string value
    """
    model = SHAPE_MODELS[shape]

    if not isinstance(raw, Mapping):
        raise ShapeMismatchError(
            f"Expected an object for {shape.value}, got {type(raw).__name__}",
            shape=shape.value,
            raw_value=raw,
        )

    try:
        return model.model_validate(dict(raw))
    except ValidationError as e:
        field_errors = {
            ".".join(str(part) for part in error["loc"]): error["msg"]
            for error in e.errors()
        }
        raise ShapeMismatchError(
            f"Failed to decode {shape.value}",
            shape=shape.value,
            raw_value=raw,
            context={"field_errors": field_errors},
            original_exception=e,
        )


def decode_attribute(raw: Any) -> AttributeData:
    """Decode one element of ``Attributes.Attribute``"""
    return decode_shape(raw, RowShape.ATTRIBUTE)


def decode_package(raw: Any) -> PackageData:
    """Decode a document's ``Package`` value"""
    return decode_shape(raw, RowShape.PACKAGE)
