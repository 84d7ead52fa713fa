from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

ASSESSMENTS_COLLECTION = "assessments"
# Dotted field path into the embedded `quarter` map.
ASSESSMENT_MONTH_FIELD = "quarter.month"
ASSESSMENT_YEAR_FIELD = "year"

Number = Union[int, float]


@dataclass(frozen=True)
class AverageMetricDefinition:
    """Which reference to follow from an assessment and which number to average."""

    label: str
    reference_field: str
    target_collection: str
    target_field: str


KNOWLEDGE_AVERAGE = AverageMetricDefinition(
    label="knowledge",
    reference_field="knowledge_id",
    target_collection="knowledge",
    target_field="correct_responses",
)

STRENGTH_AVERAGE = AverageMetricDefinition(
    label="strength",
    reference_field="strengthId",
    target_collection="strength",
    target_field="elapsed_time",
)


@dataclass(frozen=True)
class MetricAverage:
    average: Number
    count: int

    @classmethod
    def empty(cls) -> "MetricAverage":
        return cls(average=0, count=0)

    def to_dict(self) -> Dict[str, Any]:
        return {"average": self.average, "count": self.count}


def optional_number(value: Any) -> Optional[Number]:
    """
    Return `value` when it is a usable number, otherwise None.

    Absent, null, non-numeric, boolean and non-finite values all collapse into
    the same "no contribution" case.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def reference_id(value: Any) -> Optional[str]:
    """
    Extract the target document id from an assessment's reference field.

    Only a Firestore `DocumentReference` (anything with a string `id`) counts.
    A bare id string is not a reference and yields None, like anything else
    malformed.
    """
    if isinstance(value, str):
        return None
    doc_id = getattr(value, "id", None)
    if not isinstance(doc_id, str):
        return None
    if not doc_id.strip() or "/" in doc_id:
        return None
    return doc_id
