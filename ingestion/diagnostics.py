"""
Diagnostics sink for decode failures, structural absences and schema drift
"""

from collections import Counter
from typing import Any, Dict, Optional
import logging

from core.exceptions import ShapeMismatchError
from models.base import RowShape, StructuralAbsence

logger = logging.getLogger(__name__)

MAX_RAW_REPR = 500


def _truncate(value: Any) -> str:
    text = repr(value)
    if len(text) > MAX_RAW_REPR:
        return text[:MAX_RAW_REPR] + "..."
    return text


class Diagnostics:
    """
    Observes the flattener without affecting it.

    Every event is counted; log records are only emitted when ``enabled``
    (verbose mode). Methods never raise.
    """

    def __init__(self, enabled: bool = False, log: Optional[logging.Logger] = None):
        self.enabled = enabled
        self.counts: Counter = Counter()
        self._log = log or logger

    def attribute_count(self, document_id: str, count: int):
        self.counts["attribute_arrays"] += 1
        if self.enabled:
            self._log.info(f"Biosample {document_id}: found {count} attributes")

    def residual_fields(self, document_id: str, shape: RowShape, residual: Dict[str, Any]):
        """Record fields outside the known shape (schema drift)"""
        if not residual:
            return
        self.counts[f"residual_fields.{shape.value}"] += 1
        if self.enabled:
            self._log.info(
                f"Extra {shape.value} fields found for biosample {document_id}: "
                f"{_truncate(residual)}"
            )

    def decode_failure(self, document_id: str, error: ShapeMismatchError):
        self.counts[f"decode_failure.{error.shape}"] += 1
        if self.enabled:
            self._log.warning(
                f"Failed to parse {error.shape} for biosample {document_id}: "
                f"{error.message} | raw={_truncate(error.raw_value)}",
                extra={"error_context": error.to_dict()}
            )

    def structural_absence(self, document_id: str, absence: StructuralAbsence):
        self.counts[f"structural_absence.{absence.value}"] += 1
        if self.enabled:
            self._log.info(f"Biosample {document_id}: {absence.value.replace('_', ' ')}")

    def id_parse_failure(self, document_id: str):
        self.counts["id_parse_failure"] += 1
        if self.enabled:
            self._log.warning(
                f"Biosample id {document_id!r} is not a 64-bit integer; using sentinel row id"
            )

    def snapshot(self) -> Dict[str, int]:
        """Current event counts, for run summaries"""
        return dict(self.counts)
