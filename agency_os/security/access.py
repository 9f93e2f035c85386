"""
Two-tier capability gate.

Operators prove their level with a passphrase whose SHA-256 hex digest
is stored in settings. The transition engine never calls into this
module; the API checks capabilities before dispatching a command.
"""

import hashlib
import hmac
import logging

from ..models import OperatorLevel, Settings, StepOwner
from ..models.onboarding import OnboardingStep

logger = logging.getLogger(__name__)

# Task stages only an elevated operator may move work into. Posts are ungated.
ELEVATED_TASK_STAGES = frozenset(("CEO APPROVAL", "DEPLOYED"))


class AccessSetupError(ValueError):
    """Passphrases rejected during first-time setup."""


def hash_passphrase(phrase: str) -> str:
    return hashlib.sha256(phrase.encode("utf-8")).hexdigest()


def initialize_access(elevated_phrase: str, standard_phrase: str) -> tuple[str, str]:
    """
    Validate setup phrases and return their (elevated, standard) hashes.

    Raises:
        AccessSetupError: if either phrase is blank or they are identical.
    """
    elevated_phrase = (elevated_phrase or "").strip()
    standard_phrase = (standard_phrase or "").strip()
    if not elevated_phrase or not standard_phrase:
        raise AccessSetupError("Both access phrases are required")
    if elevated_phrase == standard_phrase:
        raise AccessSetupError("Elevated and standard phrases must differ")
    return hash_passphrase(elevated_phrase), hash_passphrase(standard_phrase)


def authenticate(settings: Settings, phrase: str | None) -> OperatorLevel | None:
    """Operator level for a passphrase, or None if it matches neither hash."""
    if not phrase:
        return None
    digest = hash_passphrase(phrase.strip())
    hashes = settings.access_phrase_hashes
    if hashes.elevated and hmac.compare_digest(digest, hashes.elevated):
        return OperatorLevel.ELEVATED
    if hashes.standard and hmac.compare_digest(digest, hashes.standard):
        return OperatorLevel.STANDARD
    logger.info("Access phrase rejected")
    return None


def can_complete_step(level: OperatorLevel, step: OnboardingStep) -> bool:
    return step.owner != StepOwner.CEO or level == OperatorLevel.ELEVATED


def can_advance_to(level: OperatorLevel, stage: str) -> bool:
    """CEO approval and deployment are reserved for elevated operators."""
    return stage not in ELEVATED_TASK_STAGES or level == OperatorLevel.ELEVATED
