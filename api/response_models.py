"""
Shared Pydantic request and response models for the Agency OS API.

Drafts and patches are free-form camelCase objects (the same shape as the
persisted snapshot); the models below cover the fixed-shape bodies.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from agency_os.transitions import PlannedPostRow

# ==== Envelopes ====


class ListResponse(BaseModel):
    """Standard list endpoint response."""

    items: list[Any] = Field(default_factory=list, description="Result items")
    total: int = Field(description="Total count")


class MutationResponse(BaseModel):
    """Standard mutation result."""

    success: bool = Field(description="Whether the operation succeeded")

    model_config = {"extra": "allow"}


class CreatedResponse(BaseModel):
    """Result of a create-style operation."""

    id: int = Field(description="Id of the new record")


class CreatedManyResponse(BaseModel):
    """Result of a bulk-generation operation."""

    ids: list[int] = Field(default_factory=list, description="Contiguous ids of the new records")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or degraded")
    initialized: bool
    persistence: str = Field(description="online or offline")
    timestamp: str


class SessionResponse(BaseModel):
    level: str = Field(description="ceo or team")


# ==== Requests ====


class SetupRequest(BaseModel):
    """First-time access phrase setup."""

    elevated_phrase: str = Field(..., min_length=1, description="CEO access phrase")
    standard_phrase: str = Field(..., min_length=1, description="Team access phrase")


class TimelineEventRequest(BaseModel):
    text: str = Field(..., min_length=1)
    kind: Literal["system", "manual"] = "manual"


class StageRequest(BaseModel):
    """Move a task or post to a pipeline stage, or add a note."""

    stage: str = Field(..., description="Target stage; must be in the pipeline")
    note: str | None = Field(default=None, description="Free-text note; logged as a note entry")


class StepRequest(BaseModel):
    completed: bool


class BlockedRequest(BaseModel):
    blocked: bool = True


class PlannedPostRowModel(BaseModel):
    """One row of the monthly planner."""

    platform: str
    post_type: str
    hook_idea: str
    date: str = Field(..., description="Scheduled date, YYYY-MM-DD")
    assigned_to: str
    pillar: str = "Other"

    def to_row(self) -> PlannedPostRow:
        return PlannedPostRow(
            platform=self.platform,
            post_type=self.post_type,
            hook_idea=self.hook_idea,
            date=self.date,
            assigned_to=self.assigned_to,
            pillar=self.pillar or "Other",
        )


class MonthlyPlanRequest(BaseModel):
    rows: list[PlannedPostRowModel] = Field(default_factory=list)
