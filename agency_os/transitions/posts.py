"""
Content post transitions.

Publishing a post and logging its first performance numbers are the two
triggers here. The breakout capture fires at most once per post because
it is guarded by the stored performance being empty.
"""

import logging
from dataclasses import replace
from datetime import datetime

from ..contracts import THRESHOLDS
from ..ids import allocate_ids, next_id
from ..models import (
    POST_PIPELINE,
    PUBLISHED,
    ActivityType,
    EntryStatus,
    KnowledgeCategory,
    KnowledgeEntry,
    OperatorLevel,
    PerformanceLog,
    Post,
    Snapshot,
)
from ..models.base import day, iso, pick
from .commands import AddPost, AdvancePostStage, GenerateMonthlyPosts, UpdatePost
from .common import (
    TransitionResult,
    activity,
    merge_patch,
    replace_in,
    stage_activity,
    unchanged,
    with_client_events,
)

logger = logging.getLogger(__name__)

PROTECTED = frozenset(("id", "createdAt", "status", "activityLog", "performance"))


def add_post(snapshot: Snapshot, cmd: AddPost, now: datetime) -> TransitionResult:
    post_id = next_id(snapshot.posts)
    doc = {
        k: v
        for k, v in cmd.draft.items()
        if k not in ("id", "createdAt", "created_at", "activityLog", "activity_log", "performance")
    }
    post = Post.from_dict(doc)
    if post.status not in POST_PIPELINE:
        logger.warning("add_post: unknown stage %r, starting at %s", post.status, POST_PIPELINE[0])
        post = replace(post, status=POST_PIPELINE[0])
    post = replace(
        post,
        id=post_id,
        activity_log=(
            activity(
                now,
                ActivityType.CREATED,
                f"Post planned and assigned to {post.assigned_to}",
                cmd.author,
            ),
        ),
        created_at=iso(now),
        updated_at=iso(now),
    )
    logger.info("Post %s planned for client %s", post_id, post.client_id, extra={"post_id": post_id})
    return TransitionResult(snapshot.with_(posts=(*snapshot.posts, post)), (post_id,))


def is_breakout(perf: PerformanceLog, thresholds: dict[str, float] = THRESHOLDS) -> bool:
    return (
        perf.save_rate > thresholds["breakout_save_rate"]
        or perf.share_rate > thresholds["breakout_share_rate"]
    )


def breakout_entry(post: Post, perf: PerformanceLog, entry_id: int, now: datetime) -> KnowledgeEntry:
    content = (
        "### High-Performance Post Recorded\n\n"
        f"**Format:** {post.post_type}\n"
        f"**Hook:** {post.hook}\n"
        "**Performance:**\n"
        f"- Save Rate: {perf.save_rate * 100:.1f}%\n"
        f"- Share Rate: {perf.share_rate * 100:.1f}%\n\n"
        "This post outperformed baseline metrics. Analyze the trigger and format "
        "used here to replicate success."
    )
    return KnowledgeEntry(
        id=entry_id,
        title=f"Top Performer: {post.hook}",
        category=KnowledgeCategory.CLIENT_KNOWLEDGE_BASE,
        pillar=post.content_pillar,
        tags=("Auto-Generated", "High-Performance", post.post_type),
        status=EntryStatus.ACTIVE,
        content=content,
        linked_client_id=post.client_id,
        created_at=iso(now),
        updated_at=iso(now),
    )


def update_post(
    snapshot: Snapshot,
    cmd: UpdatePost,
    now: datetime,
    thresholds: dict[str, float] = THRESHOLDS,
) -> TransitionResult:
    old = snapshot.post(cmd.post_id)
    if old is None:
        logger.warning("update_post: post %s not found", cmd.post_id)
        return unchanged(snapshot)

    raw_perf = pick(cmd.patch, "performance")
    patch = {k: v for k, v in cmd.patch.items() if k != "performance"}
    post = merge_patch(old, patch, PROTECTED, now)

    if raw_perf is None:
        return TransitionResult(snapshot.with_(posts=replace_in(snapshot.posts, post)))
    if not old.is_published:
        logger.warning(
            "update_post: performance for post %s dropped, stage is %s", old.id, old.status
        )
        return TransitionResult(snapshot.with_(posts=replace_in(snapshot.posts, post)))

    perf = raw_perf if isinstance(raw_perf, PerformanceLog) else PerformanceLog.from_dict(raw_perf)
    post = replace(post, performance=perf)
    snapshot = snapshot.with_(posts=replace_in(snapshot.posts, post))

    if old.performance is None and is_breakout(perf, thresholds):
        entry = breakout_entry(post, perf, next_id(snapshot.protocols), now)
        snapshot = snapshot.with_(protocols=(*snapshot.protocols, entry))
        snapshot = with_client_events(
            snapshot,
            post.client_id,
            [f"Top performer: {post.hook} ({perf.save_rate * 100:.1f}% save rate)"],
            now,
        )
        logger.info(
            "Post %s is a breakout, captured as knowledge entry %s", post.id, entry.id,
            extra={"post_id": post.id, "save_rate": perf.save_rate, "share_rate": perf.share_rate},
        )
    return TransitionResult(snapshot)


def advance_post_stage(snapshot: Snapshot, cmd: AdvancePostStage, now: datetime) -> TransitionResult:
    post = snapshot.post(cmd.post_id)
    if post is None:
        logger.warning("advance_post_stage: post %s not found", cmd.post_id)
        return unchanged(snapshot)

    entry = stage_activity(POST_PIPELINE, post.status, cmd.stage, cmd.author, cmd.note, now)
    if entry is None:
        logger.warning("advance_post_stage: %r is not a post stage", cmd.stage)
        return unchanged(snapshot)

    publishing = cmd.stage == PUBLISHED and post.status != PUBLISHED
    updated = replace(
        post,
        status=cmd.stage,
        activity_log=(*post.activity_log, entry),
        published_date=day(now) if publishing else post.published_date,
        updated_at=iso(now),
    )
    snapshot = snapshot.with_(posts=replace_in(snapshot.posts, updated))
    if publishing:
        platforms = ", ".join(post.platforms)
        snapshot = with_client_events(
            snapshot,
            post.client_id,
            [f"Post '{post.hook}' published on {platforms} on {day(now)}"],
            now,
        )
        logger.info("Post %s published", post.id, extra={"post_id": post.id})
    return TransitionResult(snapshot)


def generate_monthly_posts(snapshot: Snapshot, cmd: GenerateMonthlyPosts, now: datetime) -> TransitionResult:
    client = snapshot.client(cmd.client_id)
    if client is None:
        logger.warning("generate_monthly_posts: client %s not found", cmd.client_id)
        return unchanged(snapshot)

    ids = allocate_ids(snapshot.posts, len(cmd.rows))
    created = tuple(
        Post(
            id=post_id,
            client_id=client.id,
            platforms=(row.platform,),
            post_type=row.post_type,
            content_pillar=row.pillar or "Other",
            template_type="Template A",
            hook=row.hook_idea,
            cta="Link in bio",
            cta_type="Link in bio",
            scheduled_date=row.date,
            scheduled_time="10:00",
            status=POST_PIPELINE[0],
            assigned_to=row.assigned_to,
            activity_log=(
                activity(
                    now, ActivityType.CREATED, "Auto-generated from Monthly Planner", OperatorLevel.ELEVATED
                ),
            ),
            created_at=iso(now),
            updated_at=iso(now),
        )
        for post_id, row in zip(ids, cmd.rows)
    )
    logger.info(
        "Planned %d posts for client %s", len(created), client.id, extra={"client_id": client.id}
    )
    return TransitionResult(snapshot.with_(posts=(*snapshot.posts, *created)), tuple(ids))
