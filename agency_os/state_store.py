"""
State Store - the single authoritative snapshot of the agency.

Every mutation goes through ``dispatch``: commands are applied one at a
time under a lock, the snapshot is replaced wholesale, then the change
listener (normally PersistenceBridge.save) is notified. A failing
listener never rolls the in-memory state back.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime

from .contracts import THRESHOLDS
from .models import EventKind, OperatorLevel, Snapshot, utc_now
from .transitions import (
    AddClient,
    AddPost,
    AddProtocol,
    AddTask,
    AddTimelineEvent,
    AdvancePostStage,
    AdvanceTaskStage,
    Command,
    DeleteClient,
    DeleteProtocol,
    GenerateMonthlyPosts,
    GenerateSprintTasks,
    InitializeAccess,
    PlannedPostRow,
    RecordPromptUsage,
    SetOnboardingBlocked,
    TransitionResult,
    UpdateClient,
    UpdateOnboardingStep,
    UpdatePost,
    UpdateProtocol,
    UpdateTask,
    apply,
)

logger = logging.getLogger(__name__)


class StateStoreError(RuntimeError):
    """The store was used outside its initialised scope."""


class StateStore:
    """
    Holds the current Snapshot and applies commands serially.

    Args:
        snapshot: starting state (empty when None)
        on_change: called with each new snapshot after it is installed
        thresholds: breakout/health thresholds passed to the reducer
        clock: returns "now"; tests pass a fixed clock
    """

    def __init__(
        self,
        snapshot: Snapshot | None = None,
        on_change: Callable[[Snapshot], None] | None = None,
        thresholds: dict[str, float] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._snapshot = snapshot or Snapshot()
        self._on_change = on_change
        self._thresholds = thresholds or THRESHOLDS
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def thresholds(self) -> dict[str, float]:
        return self._thresholds

    def now(self) -> datetime:
        """Current time by the injected clock, for derived reads."""
        return self._clock() if self._clock else utc_now()

    def dispatch(self, command: Command) -> TransitionResult:
        with self._lock:
            now = self.now()
            result = apply(self._snapshot, command, now=now, thresholds=self._thresholds)
            self._snapshot = result.snapshot
            if self._on_change is not None:
                try:
                    self._on_change(result.snapshot)
                except Exception as e:
                    logger.error(f"State change listener failed: {e}", exc_info=True)
        return result

    # ==================== Clients ====================

    def add_client(self, draft: dict) -> int:
        return self.dispatch(AddClient(draft)).created_id

    def update_client(self, client_id: int, patch: dict) -> None:
        self.dispatch(UpdateClient(client_id, patch))

    def delete_client(self, client_id: int) -> None:
        self.dispatch(DeleteClient(client_id))

    def add_timeline_event(self, client_id: int, text: str, kind: EventKind = EventKind.SYSTEM) -> None:
        self.dispatch(AddTimelineEvent(client_id, text, kind))

    # ==================== Tasks ====================

    def add_task(self, draft: dict, author: OperatorLevel = OperatorLevel.STANDARD) -> int:
        return self.dispatch(AddTask(draft, author)).created_id

    def update_task(self, task_id: int, patch: dict) -> None:
        self.dispatch(UpdateTask(task_id, patch))

    def advance_task_stage(
        self, task_id: int, stage: str, author: OperatorLevel, note: str | None = None
    ) -> None:
        self.dispatch(AdvanceTaskStage(task_id, stage, author, note))

    def generate_sprint_tasks(self, client_id: int) -> list[int]:
        return list(self.dispatch(GenerateSprintTasks(client_id)).created_ids)

    # ==================== Posts ====================

    def add_post(self, draft: dict, author: OperatorLevel = OperatorLevel.STANDARD) -> int:
        return self.dispatch(AddPost(draft, author)).created_id

    def update_post(self, post_id: int, patch: dict) -> None:
        self.dispatch(UpdatePost(post_id, patch))

    def advance_post_stage(
        self, post_id: int, stage: str, author: OperatorLevel, note: str | None = None
    ) -> None:
        self.dispatch(AdvancePostStage(post_id, stage, author, note))

    def generate_monthly_posts(self, client_id: int, rows: Iterable[PlannedPostRow]) -> list[int]:
        return list(self.dispatch(GenerateMonthlyPosts(client_id, tuple(rows))).created_ids)

    # ==================== Knowledge ====================

    def add_protocol(self, draft: dict) -> int:
        return self.dispatch(AddProtocol(draft)).created_id

    def update_protocol(self, entry_id: int, patch: dict) -> None:
        self.dispatch(UpdateProtocol(entry_id, patch))

    def delete_protocol(self, entry_id: int) -> None:
        self.dispatch(DeleteProtocol(entry_id))

    def record_prompt_usage(self, entry_id: int) -> None:
        self.dispatch(RecordPromptUsage(entry_id))

    # ==================== Onboarding / settings ====================

    def update_onboarding_step(self, protocol_id: str, step_id: str, completed: bool) -> None:
        self.dispatch(UpdateOnboardingStep(protocol_id, step_id, completed))

    def set_onboarding_blocked(self, protocol_id: str, blocked: bool = True) -> None:
        self.dispatch(SetOnboardingBlocked(protocol_id, blocked))

    def initialize_access(self, elevated_hash: str, standard_hash: str) -> None:
        self.dispatch(InitializeAccess(elevated_hash, standard_hash))


# Singleton accessor
_store: StateStore | None = None


def init_store(
    snapshot: Snapshot | None = None,
    on_change: Callable[[Snapshot], None] | None = None,
    **kwargs,
) -> StateStore:
    """Install the process-wide store."""
    global _store
    _store = StateStore(snapshot, on_change, **kwargs)
    return _store


def get_store() -> StateStore:
    """The process-wide store. Raises StateStoreError before init_store()."""
    if _store is None:
        raise StateStoreError("State store used before init_store()")
    return _store


def reset_store() -> None:
    global _store
    _store = None
