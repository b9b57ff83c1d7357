"""Sequence labeling through the CRF engine."""

from .oracle import CheckResult, LabelingOracle, ModelHandle
from .template import DEFAULT_RULES, FeatureTemplate, parse_rules

__all__ = [
    "CheckResult",
    "DEFAULT_RULES",
    "FeatureTemplate",
    "LabelingOracle",
    "ModelHandle",
    "parse_rules",
]
