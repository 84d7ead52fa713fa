from learnhub.assessments.averages import AverageMetricHandler
from learnhub.assessments.models import (
    KNOWLEDGE_AVERAGE,
    STRENGTH_AVERAGE,
    AverageMetricDefinition,
    MetricAverage,
)

__all__ = [
    "AverageMetricDefinition",
    "AverageMetricHandler",
    "KNOWLEDGE_AVERAGE",
    "MetricAverage",
    "STRENGTH_AVERAGE",
]
