"""
Custom exceptions for the flattening pipeline with structured error context.

Every failure raised by the pipeline carries a context dictionary so the
failing stage (connect, ddl, extract, write) can be identified from the
log record alone.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   ├── SourceConnectionError
    │   └── DocumentStreamError
    ├── TransformationError
    │   └── ShapeMismatchError
    └── LoadError
        └── DatabaseError
            ├── SinkConnectionError
            ├── SchemaSetupError
            └── RowWriteError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all ETL-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (stage, source, table, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    @property
    def stage(self) -> Optional[str]:
        """Pipeline stage the error was raised from (if recorded)"""
        return self.context.get("stage")

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for document source failures."""
    pass


class SourceConnectionError(ExtractionError):
    """
    Exception raised when the document store is unreachable at startup.

    Context should include:
        - stage: "connect"
        - source_uri: Connection string (credentials are not logged)
        - database / collection: Target namespace
    """
    pass


class DocumentStreamError(ExtractionError):
    """
    Exception raised when the cursor fails while documents are being read.

    Context should include:
        - stage: "extract"
        - documents_read: Number of documents yielded before the failure
    """
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(ETLException):
    """Base exception for document flattening failures."""
    pass


class ShapeMismatchError(TransformationError):
    """
    Raised by the shape decoder when a nested value cannot be decoded.

    Recoverable: the flattener skips the offending row and carries on.

    Context should include:
        - shape: Target shape name ("attribute" or "package")
        - raw_value: The value that failed to decode
        - field_errors: Per-field error descriptions (if the value was a mapping)
    """

    def __init__(
        self,
        message: str,
        shape: str,
        raw_value: Any,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        context = dict(context or {})
        context.setdefault("shape", shape)
        super().__init__(message, context, original_exception)
        self.shape = shape
        self.raw_value = raw_value


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for sink failures."""
    pass


class DatabaseError(LoadError):
    """
    Exception raised when sink database operations fail.

    Context should include:
        - stage: Pipeline stage ("connect", "ddl", "write")
        - operation: Type of database operation (CONNECT, DROP, CREATE, INSERT)
        - table_name: Name of the table (if applicable)
    """
    pass


class SinkConnectionError(DatabaseError):
    """The DuckDB file could not be opened."""
    pass


class SchemaSetupError(DatabaseError):
    """Dropping or creating the sink tables failed."""
    pass


class RowWriteError(DatabaseError):
    """
    A row append was rejected by the sink.

    Fatal for the run. Rows appended before the failure stay in the table.
    """
    pass
