"""
Cloud Functions entry points.

Callables (authenticated, request/response):
  getKnowledgeAverage  -> average `knowledge.correct_responses` for a month/year
  getStrengthAverage   -> average `strength.elapsed_time` for a month/year

Scheduled:
  publishScheduledArticlesDaily -> flip today's `Scheduled` articles to `Published`

Exported names are the deployed function names the web client calls, so they
keep their camelCase spelling.
"""

import logging
from typing import Any, Dict, Optional

from firebase_admin import firestore
from firebase_functions import https_fn, options, scheduler_fn

from functions.utils.callable_response import to_callable_response
from learnhub.articles.publisher import PublishOutcome, ScheduledPublisher
from learnhub.assessments.averages import AverageMetricHandler
from learnhub.assessments.models import KNOWLEDGE_AVERAGE, STRENGTH_AVERAGE, AverageMetricDefinition
from learnhub.common.config import load_functions_config
from learnhub.common.logging import bind_request_id, init_structured_logging
from learnhub.persistence.firebase_client import get_firestore_client

CONFIG = load_functions_config()

init_structured_logging(service=CONFIG.service_name, level=CONFIG.log_level)
logger = logging.getLogger(__name__)

# Per-function instance cap for cost control; region applies to every function.
options.set_global_options(region=CONFIG.region, max_instances=CONFIG.max_instances)


def _get_firestore() -> firestore.Client:
    return get_firestore_client()


def _request_id(req: Any) -> Optional[str]:
    raw = getattr(req, "raw_request", None)
    headers = getattr(raw, "headers", None)
    if headers is None:
        return None
    # "TRACE_ID/SPAN_ID;o=1" -> TRACE_ID
    trace = headers.get("X-Cloud-Trace-Context") or ""
    return trace.split("/", 1)[0] or headers.get("X-Request-ID")


def _run_average(definition: AverageMetricDefinition, req: https_fn.CallableRequest) -> Dict[str, Any]:
    with bind_request_id(request_id=_request_id(req)):
        handler = AverageMetricHandler(_get_firestore(), definition, max_workers=CONFIG.fetch_max_workers)
        return to_callable_response(handler.handle(auth=req.auth, data=req.data))


def _run_publisher() -> PublishOutcome:
    with bind_request_id():
        try:
            return ScheduledPublisher(_get_firestore()).run()
        except Exception:
            logger.exception("publishScheduledArticlesDaily failed")
            raise


@https_fn.on_call()
def getKnowledgeAverage(req: https_fn.CallableRequest) -> Dict[str, Any]:  # noqa: N802
    return _run_average(KNOWLEDGE_AVERAGE, req)


@https_fn.on_call()
def getStrengthAverage(req: https_fn.CallableRequest) -> Dict[str, Any]:  # noqa: N802
    return _run_average(STRENGTH_AVERAGE, req)


@scheduler_fn.on_schedule(schedule=CONFIG.publish_schedule, timezone=CONFIG.publish_timezone)
def publishScheduledArticlesDaily(event: scheduler_fn.ScheduledEvent) -> None:  # noqa: N802
    _ = event  # unused
    _run_publisher()
