"""Onboarding checklist transitions."""

import logging
from dataclasses import replace
from datetime import datetime

from ..contracts import ONBOARDING_PROGRESS_MAX
from ..models import OnboardingState, OnboardingStatus, Snapshot, onboarding_progress
from ..models.base import day, iso
from .commands import SetOnboardingBlocked, UpdateOnboardingStep
from .common import TransitionResult, replace_in, unchanged, with_client_events

logger = logging.getLogger(__name__)


def update_onboarding_step(snapshot: Snapshot, cmd: UpdateOnboardingStep, now: datetime) -> TransitionResult:
    protocol = snapshot.onboarding(cmd.protocol_id)
    if protocol is None:
        logger.warning("update_onboarding_step: protocol %s not found", cmd.protocol_id)
        return unchanged(snapshot)
    step = protocol.step(cmd.step_id)
    if step is None:
        logger.warning(
            "update_onboarding_step: step %s not in protocol %s", cmd.step_id, cmd.protocol_id
        )
        return unchanged(snapshot)

    newly_completed = cmd.completed and not step.completed
    if cmd.completed:
        changed = replace(step, completed=True, completed_at=step.completed_at if step.completed else iso(now))
    else:
        changed = replace(step, completed=False, completed_at=None)
    steps = tuple(changed if s.id == step.id else s for s in protocol.steps)

    progress = onboarding_progress(steps)
    done = progress >= ONBOARDING_PROGRESS_MAX
    protocol = replace(
        protocol,
        steps=steps,
        progress=progress,
        status=OnboardingState.COMPLETED if done else OnboardingState.ON_TRACK,
        last_updated=iso(now),
    )
    snapshot = snapshot.with_(onboardings=replace_in(snapshot.onboardings, protocol))

    if newly_completed:
        today = day(now)
        events = [f"Onboarding Step {step.id} completed: {step.label} on {today}"]
        if done:
            events.append(f"Onboarding complete, sprint officially live: {today}")
        snapshot = with_client_events(
            snapshot,
            protocol.client_id,
            events,
            now,
            onboarding_status=OnboardingStatus.COMPLETE if done else OnboardingStatus.IN_PROGRESS,
        )
        logger.info(
            "Onboarding step %s completed for client %s (%d/%d)",
            step.id, protocol.client_id, progress, ONBOARDING_PROGRESS_MAX,
            extra={"client_id": protocol.client_id, "protocol_id": protocol.id},
        )
    return TransitionResult(snapshot)


def set_onboarding_blocked(snapshot: Snapshot, cmd: SetOnboardingBlocked, now: datetime) -> TransitionResult:
    """Flag or unflag a protocol as blocked. Clearing restores the derived status."""
    protocol = snapshot.onboarding(cmd.protocol_id)
    if protocol is None:
        logger.warning("set_onboarding_blocked: protocol %s not found", cmd.protocol_id)
        return unchanged(snapshot)

    if cmd.blocked:
        status = OnboardingState.BLOCKED
    elif protocol.is_complete:
        status = OnboardingState.COMPLETED
    else:
        status = OnboardingState.ON_TRACK
    protocol = replace(protocol, status=status, last_updated=iso(now))
    logger.info("Onboarding %s marked %s", protocol.id, status.value)
    return TransitionResult(snapshot.with_(onboardings=replace_in(snapshot.onboardings, protocol)))
