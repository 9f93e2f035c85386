"""Content posts, their pipeline and the performance log."""

from dataclasses import dataclass

from .activity import ActivityEntry, parse_log
from .base import Record, as_tuple, pick

POST_PIPELINE: tuple[str, ...] = (
    "PLANNED",
    "BRIEF WRITTEN",
    "IN PRODUCTION",
    "REVIEW",
    "CEO APPROVAL",
    "CLIENT APPROVAL",
    "SCHEDULED",
    "PUBLISHED",
)
PUBLISHED = POST_PIPELINE[-1]


def rate(part: float, reach: float) -> float:
    """part / reach, or 0 when there was no reach."""
    if not reach:
        return 0.0
    return part / reach


@dataclass(frozen=True)
class PerformanceLog(Record):
    reach: float = 0
    impressions: float = 0
    saves: float = 0
    shares: float = 0
    comments: float = 0
    likes: float = 0
    save_rate: float = 0.0
    share_rate: float = 0.0
    ceo_rating: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, row: dict) -> "PerformanceLog":
        """Build from raw metrics. The two rates are always derived, never trusted."""
        reach = pick(row, "reach", 0)
        saves = pick(row, "saves", 0)
        shares = pick(row, "shares", 0)
        return cls(
            reach=reach,
            impressions=pick(row, "impressions", 0),
            saves=saves,
            shares=shares,
            comments=pick(row, "comments", 0),
            likes=pick(row, "likes", 0),
            save_rate=rate(saves, reach),
            share_rate=rate(shares, reach),
            ceo_rating=pick(row, "ceo_rating", ""),
            notes=pick(row, "notes", ""),
        )


@dataclass(frozen=True)
class Post(Record):
    """
    A content-production unit. ``status`` holds the current pipeline stage.

    ``performance`` stays None until the post is PUBLISHED.
    """

    id: int = 0
    client_id: int = 0
    platforms: tuple[str, ...] = ()
    post_type: str = "Static Post"
    content_pillar: str = ""
    template_type: str | None = None
    hook: str = ""
    trigger_used: str | None = None
    caption_body: str = ""
    cta: str = ""
    cta_type: str = "Link in bio"
    hashtags: str = ""
    visual_brief: str = ""
    scheduled_date: str = ""
    scheduled_time: str = ""
    published_date: str | None = None
    status: str = POST_PIPELINE[0]
    priority: str = "normal"
    assigned_to: str = ""
    linked_task_id: int | None = None
    asset_links: tuple[str, ...] = ()
    reference_post: str | None = None
    performance: PerformanceLog | None = None
    activity_log: tuple[ActivityEntry, ...] = ()
    created_at: str = ""
    updated_at: str = ""

    @property
    def is_published(self) -> bool:
        return self.status == PUBLISHED

    @classmethod
    def from_dict(cls, row: dict) -> "Post":
        performance = pick(row, "performance")
        return cls(
            id=int(pick(row, "id", 0)),
            client_id=int(pick(row, "client_id", 0)),
            platforms=as_tuple(pick(row, "platforms")),
            post_type=pick(row, "post_type", "Static Post"),
            content_pillar=pick(row, "content_pillar", ""),
            template_type=pick(row, "template_type"),
            hook=pick(row, "hook", ""),
            trigger_used=pick(row, "trigger_used"),
            caption_body=pick(row, "caption_body", ""),
            cta=pick(row, "cta", ""),
            cta_type=pick(row, "cta_type", "Link in bio"),
            hashtags=pick(row, "hashtags", ""),
            visual_brief=pick(row, "visual_brief", ""),
            scheduled_date=pick(row, "scheduled_date", ""),
            scheduled_time=pick(row, "scheduled_time", ""),
            published_date=pick(row, "published_date"),
            status=pick(row, "status", POST_PIPELINE[0]),
            priority=pick(row, "priority", "normal"),
            assigned_to=pick(row, "assigned_to", ""),
            linked_task_id=pick(row, "linked_task_id"),
            asset_links=as_tuple(pick(row, "asset_links")),
            reference_post=pick(row, "reference_post"),
            performance=PerformanceLog.from_dict(performance) if performance else None,
            activity_log=parse_log(pick(row, "activity_log")),
            created_at=pick(row, "created_at", ""),
            updated_at=pick(row, "updated_at", ""),
        )
