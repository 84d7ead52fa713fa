"""
Monthly averages over metric records referenced by assessments.

Flow for one call:
1. Filter `assessments` on `quarter.month` / `year`.
2. Collect the referenced document ids (knowledge or strength).
3. Point-read the referenced documents concurrently.
4. Average the numeric target field over the documents that have one.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from learnhub.assessments.models import (
    ASSESSMENT_MONTH_FIELD,
    ASSESSMENT_YEAR_FIELD,
    ASSESSMENTS_COLLECTION,
    AverageMetricDefinition,
    MetricAverage,
    Number,
    optional_number,
    reference_id,
)
from learnhub.common.config import DEFAULT_FETCH_MAX_WORKERS
from learnhub.common.logging import log_event
from learnhub.common.results import CallErrorCode, CallResult
from learnhub.persistence.fetch import fetch_documents

logger = logging.getLogger(__name__)

UNAUTHENTICATED_MESSAGE = "User must be authenticated."
INVALID_ARGUMENT_MESSAGE = "thisMonth and thisYear must be provided in the request data."


class AverageMetricHandler:
    """
    One monthly-average callable (knowledge or strength).

    The Firestore client is injected so tests can substitute an in-memory fake.
    """

    def __init__(
        self,
        db: Any,
        definition: AverageMetricDefinition,
        *,
        max_workers: int = DEFAULT_FETCH_MAX_WORKERS,
    ) -> None:
        self._db = db
        self._definition = definition
        self._max_workers = max_workers

    @property
    def definition(self) -> AverageMetricDefinition:
        return self._definition

    def handle(self, *, auth: Any, data: Any) -> CallResult:
        """
        Validate a callable request and compute the average.

        Validation failures are reported before any database access. Any
        failure while querying or aggregating becomes a generic INTERNAL
        result; the detail only goes to the logs.
        """
        if not auth:
            return CallResult.failure(CallErrorCode.UNAUTHENTICATED, UNAUTHENTICATED_MESSAGE)

        payload = data if isinstance(data, Mapping) else {}
        month = payload.get("thisMonth")
        year = payload.get("thisYear")
        if not month or not year:
            return CallResult.failure(CallErrorCode.INVALID_ARGUMENT, INVALID_ARGUMENT_MESSAGE)

        try:
            result = self.compute(month, year)
        except Exception:
            logger.exception("Error calculating %s average.", self._definition.label)
            return CallResult.failure(
                CallErrorCode.INTERNAL,
                f"Error calculating {self._definition.label} average.",
            )
        return CallResult.success(result.to_dict())

    def compute(self, month: Any, year: Any) -> MetricAverage:
        d = self._definition
        assessments = (
            self._db.collection(ASSESSMENTS_COLLECTION)
            .where(ASSESSMENT_MONTH_FIELD, "==", month)
            .where(ASSESSMENT_YEAR_FIELD, "==", year)
            .get()
        )
        if not assessments:
            logger.info("No assessments found for the given month and year.")
            return MetricAverage.empty()

        doc_ids = self._collect_reference_ids(assessments)
        if not doc_ids:
            logger.info("No %s references found in assessments.", d.reference_field)
            return MetricAverage.empty()

        logger.info("Found %d %s document IDs.", len(doc_ids), d.label)
        snapshots = fetch_documents(self._db, d.target_collection, doc_ids, max_workers=self._max_workers)

        total: Number = 0
        count = 0
        # Iterate references, not snapshots: an assessment counts once per reference.
        for doc_id in doc_ids:
            snap = snapshots.get(doc_id)
            value = self._target_value(snap)
            if value is None:
                continue
            total += value
            count += 1

        average = total / count if count > 0 else 0
        log_event(
            logger,
            "assessments.average_computed",
            message=f"Calculated average of {average} from {count} documents.",
            metric=d.label,
            month=month,
            year=year,
            average=average,
            count=count,
        )
        return MetricAverage(average=average, count=count)

    def _collect_reference_ids(self, assessments: Any) -> List[str]:
        field = self._definition.reference_field
        doc_ids: List[str] = []
        for snap in assessments:
            data = snap.to_dict() or {}
            doc_id = reference_id(data.get(field))
            if doc_id is None:
                logger.debug("Skipping assessment %s: no usable %s", getattr(snap, "id", "?"), field)
                continue
            doc_ids.append(doc_id)
        return doc_ids

    def _target_value(self, snap: Any) -> Optional[Number]:
        if snap is None or not getattr(snap, "exists", False):
            return None
        data = snap.to_dict() or {}
        return optional_number(data.get(self._definition.target_field))
