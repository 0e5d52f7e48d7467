from sqlalchemy import MetaData
import enum

metadata = MetaData()


# ============================================================================
# ENUMS
# ============================================================================

class RowShape(str, enum.Enum):
    """Known nested sub-structure shapes"""
    ATTRIBUTE = "attribute"
    PACKAGE = "package"


class StructuralAbsence(str, enum.Enum):
    """Why a nested path produced no rows for a document"""
    PACKAGE_MISSING = "package_missing"
    ATTRIBUTES_MISSING = "attributes_missing"
    ATTRIBUTES_NOT_OBJECT = "attributes_not_object"
    ATTRIBUTE_KEY_MISSING = "attribute_key_missing"
    ATTRIBUTE_NOT_ARRAY = "attribute_not_array"


class RunStatus(str, enum.Enum):
    """ETL run status"""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
