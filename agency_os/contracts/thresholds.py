"""
Thresholds Module - Trigger and health cut-offs with justifications.

THRESHOLD JUSTIFICATIONS:
========================

BREAKOUT_SAVE_RATE = 0.05 (5%)
  - Why: Saves per reach above 5% marks content people want to return to.
  - Effect: First performance log above this captures a knowledge entry.

BREAKOUT_SHARE_RATE = 0.03 (3%)
  - Why: Shares are rarer than saves; 3% is already distribution-driving.
  - Effect: Either rate crossing its line counts as a breakout.

HEALTH_CRITICAL_OVERDUE = 3 / HEALTH_CRITICAL_INACTIVE_DAYS = 14
  - Why: Three slipped deadlines or two silent weeks on a sprint client
    means the account needs CEO intervention.

HEALTH_AT_RISK_OVERDUE = 1 / HEALTH_AT_RISK_INACTIVE_DAYS = 7
  - Why: A single overdue deliverable or a silent week is the earliest
    signal worth surfacing on the roster.

Overrides:
  <AGENCY_OS_HOME>/config/thresholds.yaml, a flat mapping of name -> value.
"""

import logging
from dataclasses import dataclass

import yaml

from agency_os import paths

logger = logging.getLogger(__name__)


@dataclass
class ThresholdConfig:
    """Configuration for a single threshold."""

    name: str
    value: float
    description: str
    justification: str


# =============================================================================
# THRESHOLD DEFINITIONS
# =============================================================================

DEFAULT_THRESHOLDS = {
    "breakout_save_rate": ThresholdConfig(
        name="breakout_save_rate",
        value=0.05,
        description="Save rate (saves / reach) above which a post is a breakout",
        justification="Above 5% saves marks reference-worthy content",
    ),
    "breakout_share_rate": ThresholdConfig(
        name="breakout_share_rate",
        value=0.03,
        description="Share rate (shares / reach) above which a post is a breakout",
        justification="Shares are rarer than saves; 3% already drives distribution",
    ),
    "health_critical_overdue": ThresholdConfig(
        name="health_critical_overdue",
        value=3,
        description="Overdue active tasks at which a client is critical",
        justification="Three slipped deliverables needs CEO intervention",
    ),
    "health_critical_inactive_days": ThresholdConfig(
        name="health_critical_inactive_days",
        value=14,
        description="Days without task activity beyond which a client is critical",
        justification="Two silent weeks on an engagement is an escalation",
    ),
    "health_at_risk_overdue": ThresholdConfig(
        name="health_at_risk_overdue",
        value=1,
        description="Overdue active tasks at which a client is at risk",
        justification="Earliest slippage signal worth surfacing",
    ),
    "health_at_risk_inactive_days": ThresholdConfig(
        name="health_at_risk_inactive_days",
        value=7,
        description="Days without task activity beyond which a client is at risk",
        justification="A silent week is worth a check-in",
    ),
}

# Presentation scores shown next to the health label
HEALTH_SCORES = {"healthy": 100, "at-risk": 75, "critical": 40}

# Onboarding progress is tracked in tenths of the checklist
ONBOARDING_PROGRESS_MAX = 10


# =============================================================================
# THRESHOLD ACCESS
# =============================================================================


def load_overrides() -> dict[str, float]:
    """Read YAML overrides; unknown names and unreadable files are ignored."""
    config_file = paths.config_dir() / "thresholds.yaml"
    if not config_file.exists():
        return {}
    try:
        with open(config_file) as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read threshold overrides %s: %s", config_file, e)
        return {}

    overrides = {}
    for name, value in raw.items():
        if name not in DEFAULT_THRESHOLDS:
            logger.warning("Ignoring unknown threshold override: %s", name)
            continue
        overrides[name] = float(value)
    return overrides


def get_thresholds(overrides: dict[str, float] | None = None) -> dict[str, float]:
    """
    Get effective thresholds.

    Args:
        overrides: Explicit overrides; when None, the YAML file is consulted.

    Returns:
        Dict mapping threshold name to value
    """
    thresholds = {k: v.value for k, v in DEFAULT_THRESHOLDS.items()}
    thresholds.update(load_overrides() if overrides is None else overrides)
    return thresholds


# Defaults, without consulting the filesystem
THRESHOLDS = get_thresholds({})
