"""
Contracts Module - named cut-offs shared by the transition engine and the
derived-view calculators.
"""

from .thresholds import (
    DEFAULT_THRESHOLDS,
    HEALTH_SCORES,
    ONBOARDING_PROGRESS_MAX,
    THRESHOLDS,
    ThresholdConfig,
    get_thresholds,
)

__all__ = [
    "DEFAULT_THRESHOLDS",
    "HEALTH_SCORES",
    "ONBOARDING_PROGRESS_MAX",
    "THRESHOLDS",
    "ThresholdConfig",
    "get_thresholds",
]
