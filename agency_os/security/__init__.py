"""Capability gate."""

from .access import (
    ELEVATED_TASK_STAGES,
    AccessSetupError,
    authenticate,
    can_advance_to,
    can_complete_step,
    hash_passphrase,
    initialize_access,
)

__all__ = [
    "AccessSetupError",
    "ELEVATED_TASK_STAGES",
    "authenticate",
    "can_advance_to",
    "can_complete_step",
    "hash_passphrase",
    "initialize_access",
]
