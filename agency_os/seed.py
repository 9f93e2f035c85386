"""
Default snapshot for a fresh workspace: two clients, one task, one post
and the SOP, brand-standard and AI prompt library.
"""

from datetime import datetime, timedelta

from .knowledge import extract_prompt_variables
from .models import (
    TASK_PIPELINE,
    ActivityEntry,
    ActivityType,
    Client,
    ClientStatus,
    EventKind,
    KnowledgeCategory,
    KnowledgeEntry,
    OnboardingStatus,
    OperatorLevel,
    Post,
    Settings,
    Snapshot,
    Task,
    TimelineEvent,
)
from .models.base import day, iso, utc_now

# (id, title, pillar, tags, linked task types, content)
SOPS = (
    (
        101,
        "CLIENT ONBOARDING PROTOCOL",
        "Operations",
        ("onboarding", "client", "setup"),
        ("Client Communication",),
        "## Step 1: Revenue Gate Acceptance\nEnsure client has passed the revenue gate and "
        "contract is signed.\n\n## Step 2: Intake Form\nSend the standard intake form.\n\n"
        "## Step 3: Workspace\nCreate the client channel and invite stakeholders.\n\n"
        "## Step 4: Kickoff Call\nCEO runs the kickoff to extract the Shadow Avatar.\n\n"
        "## Step 5: Strategy Brief\nTeam drafts the Strategy Brief within 48h of kickoff.\n\n"
        "## Step 6: Approval\nCEO approves the brief.\n\n"
        "## Step 7: Content Calendar\nGenerate 30-day content calendar.\n\n"
        "## Step 8: Sprint Initialization\nCreate Active Sprint board.\n\n"
        "## Step 9: Production\nArt Director starts Template generation.\n\n"
        "## Step 10: First Batch\nReview first batch of content internally.",
    ),
    (
        102,
        "CONTENT PRODUCTION PROTOCOL",
        "Viral Engine",
        ("content", "caption", "instagram"),
        ("Content Production",),
        "## The HOOK -> TENSION -> VALUE -> PROOF -> CTA Framework\n\n"
        "Every caption must follow this structure.\n\n"
        "**1. Hook** Start with the problem.\n**2. Tension** Agitate the problem.\n"
        "**3. Value** Provide the actual solution.\n**4. Proof** Mention a result.\n"
        "**5. CTA** One single clear action.",
    ),
    (
        103,
        "AD CREATIVE PROTOCOL",
        "Conversion Mechanic",
        ("ads", "meta", "creative"),
        ("Ad Creative",),
        "## Meta Ad Funnel Structure\n\n### Cold Audience\n**Framework:** PAS\n\n"
        "### Warm Audience\n**Framework:** AIDA\n\n"
        "### Retargeting\n**Framework:** Testimonial / Offer-driven",
    ),
    (
        104,
        "VISUAL BRIEF WRITING PROTOCOL",
        "Viral Engine",
        ("design", "briefs", "art director"),
        ("Brand Design", "Content Production"),
        "## How to brief the Art Director\n\nIf they have to ask a question, your brief failed.\n\n"
        "- **Goal**\n- **Template** (A, B, or C)\n- **Text on Image**\n- **Visual Vibe**\n"
        "- **Assets to Use**\n- **Avoid**",
    ),
    (
        105,
        "SHADOW AVATAR EXTRACTION PROTOCOL",
        "Psychological Warfare",
        ("strategy", "kickoff", "avatar"),
        ("Strategy",),
        "## Extracting the Shadow\n\nClients tell you the surface desire. Find the shadow "
        "desire underneath it.\n\nListen for hesitation. That is where the truth is.",
    ),
    (
        106,
        "SPRINT DEBRIEF PROTOCOL",
        "Growth Math",
        ("analytics", "sprints", "review"),
        ("Analytics", "Strategy"),
        "## 60-Day Sprint Retrospective\n\nRun this on Day 55 of any sprint.\n\n"
        "**Data to Collect:** follower delta, engagement rate increase, leads generated vs. "
        "expected, viral hits (>2x average reach).",
    ),
    (
        107,
        "REVENUE GATE PROTOCOL",
        "Growth Math",
        ("sales", "qualification", "leads"),
        ("Strategy",),
        "## The Revenue Gate System\n\n**<1M PKR ARR:** digital products only.\n"
        "**1M - 5M PKR ARR:** Tier 1 or Tier 2.\n**>5M PKR ARR:** Tier 3.",
    ),
)

# (id, title, pillar, tags, linked task types, tool, usage notes, related ids, content)
PROMPTS = (
    (
        201,
        "NEROSOULSS ACTIVATION",
        "Psychological Warfare",
        ("system", "activation"),
        ("Strategy",),
        "gemini",
        "Run this first in any new session before asking strategy questions.",
        (),
        "Act as the agency's elite AI strategist. Be sharp, direct and ruthlessly effective.",
    ),
    (
        202,
        "SHADOW AVATAR EXTRACTION",
        "Psychological Warfare",
        ("avatar", "discovery", "psychology"),
        ("Strategy",),
        "claude",
        "Paste raw transcripts from the kickoff call into the notes variable.",
        (105,),
        "Analyze the following client kickoff notes and identify the shadow avatar.\n\n"
        "Client Niche: [[CLIENT NICHE]]\nTarget Audience: [[TARGET AUDIENCE]]\n"
        "Client Notes: [[KICKOFF NOTES]]",
    ),
    (
        203,
        "COMPETITOR TEARDOWN",
        "Market Truth",
        ("research", "competitors", "analysis"),
        ("Strategy", "Analytics"),
        "gemini",
        "Best used with web browsing enabled.",
        (),
        "Act as a ruthless market analyst.\n\nClient Niche: [[CLIENT NICHE]]\n"
        "Competitor 1: [[COMP 1 URL]]\nCompetitor 2: [[COMP 2 URL]]\nCompetitor 3: [[COMP 3 URL]]",
    ),
    (
        204,
        "CAPTION WRITING - HOOK FIRST",
        "Viral Engine",
        ("caption", "instagram", "copywriting"),
        ("Content Production",),
        "claude",
        "Better at natural-sounding copy.",
        (102,),
        "Write an Instagram caption using the HOOK -> TENSION -> VALUE -> PROOF -> CTA framework.\n\n"
        "Topic: [[CONTENT TOPIC]]\nTone: [[BRAND TONE]]\nAction: [[DESIRED ACTION]]",
    ),
    (
        205,
        "AD HOOK GENERATOR",
        "Conversion Mechanic",
        ("ads", "hooks", "performance"),
        ("Ad Creative", "Video Production"),
        "claude",
        "Use these to brief the video editor.",
        (103,),
        "Generate 5 pattern-interrupting hooks for a video ad.\n\n"
        "Product/Service: [[PRODUCT DESC]]\nAudience Pain Point: [[PAIN POINT]]",
    ),
    (
        206,
        "BLEEDING NECK IDENTIFICATION",
        "Psychological Warfare",
        ("strategy", "avatar", "pain-point"),
        ("Strategy",),
        "gemini",
        "Crucial for offer creation.",
        (),
        "My client sells: [[SERVICE/PRODUCT]]\nTo: [[TARGET AUDIENCE]]\n\n"
        "Identify the acute, urgent problem that forces them to buy right now.",
    ),
    (
        207,
        "CONTENT PILLAR GENERATOR",
        "Viral Engine",
        ("content", "strategy", "pillars"),
        ("Strategy", "Content Production"),
        "claude",
        "Run this right after the strategy brief is approved.",
        (),
        "Based on this brand summary, generate 4 content pillars.\n\nBrand Summary: [[BRAND SUMMARY]]",
    ),
    (
        208,
        "NEROLEAD - OUTREACH SCRIPTS",
        "Growth Math",
        ("sales", "outreach", "whatsapp"),
        ("Other", "Strategy"),
        "gemini",
        "Keep the context specific to improve conversion.",
        (),
        "Write a cold outreach script.\n\nTarget Lead: [[LEAD NAME/ROLE]] at [[LEAD COMPANY]]\n"
        "Lead Context: [[LEAD CONTEXT / WHY REACHING OUT]]",
    ),
    (
        209,
        "SPRINT DEBRIEF",
        "Growth Math",
        ("analytics", "sprints", "review"),
        ("Analytics",),
        "claude",
        "Internal alignment before presenting the debrief to the client.",
        (106,),
        "Act as a ruthless performance analyst.\n\nReview this 60-day sprint data:\n[[SPRINT METRICS]]",
    ),
)

BRAND_STANDARD = (
    108,
    "NEROZARB VISUAL STANDARDS",
    "Operations",
    ("brand", "design", "templates"),
    ("Brand Design",),
    "## Platinum Edge V2.1\n\n**Colors:** Nero Green `#011E13`, Neon Accent `#00FF66`, "
    "Platinum White `#F8F9FA`\n\n**Typography:** Montserrat headings, Inter body, Space Mono system.\n\n"
    "**Templates:** A (large type), B (image-heavy), C (data visualization).",
)


def _library(stamp: str) -> tuple[KnowledgeEntry, ...]:
    entries = [
        KnowledgeEntry(
            id=entry_id,
            title=title,
            category=KnowledgeCategory.SOP,
            pillar=pillar,
            tags=tags,
            content=content,
            linked_task_types=task_types,
            created_at=stamp,
            updated_at=stamp,
        )
        for entry_id, title, pillar, tags, task_types, content in SOPS
    ]
    entry_id, title, pillar, tags, task_types, content = BRAND_STANDARD
    entries.append(
        KnowledgeEntry(
            id=entry_id,
            title=title,
            category=KnowledgeCategory.BRAND_STANDARD,
            pillar=pillar,
            tags=tags,
            content=content,
            linked_task_types=task_types,
            created_at=stamp,
            updated_at=stamp,
        )
    )
    for entry_id, title, pillar, tags, task_types, tool, notes, related, content in PROMPTS:
        entries.append(
            KnowledgeEntry(
                id=entry_id,
                title=title,
                category=KnowledgeCategory.AI_PROMPT,
                pillar=pillar,
                tags=tags,
                content=content,
                prompt_tool=tool,
                prompt_variables=extract_prompt_variables(content),
                usage_notes=notes,
                linked_task_types=task_types,
                related_protocol_ids=related,
                created_at=stamp,
                updated_at=stamp,
            )
        )
    return tuple(entries)


def initial_snapshot(now: datetime | None = None) -> Snapshot:
    """The snapshot a workspace starts from when nothing is stored yet."""
    now = now or utc_now()
    stamp = iso(now)
    yesterday = iso(now - timedelta(days=1))

    mozart = Client(
        id=1,
        name="Mozart House",
        status=ClientStatus.ACTIVE_SPRINT,
        revenue_gate="1M-5M PKR",
        tier="Tier 2: 60-Day Sprint",
        ltv=150000,
        contract_value=150000,
        phone="0300-1234567",
        email="hello@mozarthouse.pk",
        contact_name="Creative Director - Ahmed",
        niche="Cultural Center / Creative Hub",
        start_date="2026-02-01",
        shadow_avatar="Surface: grow internationally. Shadow: terrified of losing cultural "
        "relevance to mainstream noise.",
        bleeding_neck="Strong offline reputation, zero consistent digital presence.",
        content_pillars=(
            "Exhibition Announcements",
            "Artist Spotlights",
            "Cultural Education",
            "Behind-the-Scenes",
        ),
        onboarding_status=OnboardingStatus.COMPLETE,
        notes="Primary active client. Austrian Cultural Centre collaboration ongoing.",
        timeline=(
            TimelineEvent(id=3, date="2026-02-02T14:00:00.000Z", event="Sprint 1 Initiated"),
            TimelineEvent(
                id=2,
                date="2026-02-01T11:00:00.000Z",
                event="Contract Signed & Invoice Paid",
                type=EventKind.MANUAL,
            ),
            TimelineEvent(
                id=1, date="2026-02-01T10:00:00.000Z", event="Client Installed via Revenue Gate"
            ),
        ),
        created_at="2026-02-01T10:00:00.000Z",
        updated_at=stamp,
    )
    yz = Client(
        id=2,
        name="YZ Corp",
        status=ClientStatus.DISCOVERY,
        revenue_gate=">5M PKR",
        tier="Tier 3: Market Dominance",
        ltv=0,
        contract_value=300000,
        phone="0333-9876543",
        email="contact@yzcorp.pk",
        contact_name="CEO - Fatima",
        niche="Educational Services / B2B",
        start_date=day(now),
        shadow_avatar="Surface: wants to modernize. Shadow: afraid of alienating legacy "
        "clients with a trendy look.",
        bleeding_neck="Outdated web presence causing loss of trust in enterprise deals.",
        content_pillars=("Corporate Authority", "Case Studies", "Legacy Meets Innovation"),
        notes="Discovery call completed. Proposal sent.",
        timeline=(
            TimelineEvent(
                id=1, date=stamp, event="Client discovery call scheduled.", type=EventKind.MANUAL
            ),
        ),
        created_at=stamp,
        updated_at=stamp,
    )
    audit = Task(
        id=1,
        client_id=1,
        name="Brand & Positioning Audit",
        category="Strategy",
        phase="phase1",
        stage_pipeline=TASK_PIPELINE,
        current_stage="IN PRODUCTION",
        assigned_node="Art Director",
        priority="high",
        deadline=day(now + timedelta(days=2)),
        estimated_hours=4,
        brief="Audit current brand: logo, colors, voice, content pillars. "
        "Document what exists vs. what's needed.",
        asset_links=("https://drive.google.com/drive/folders/audit123",),
        activity_log=(
            ActivityEntry(
                timestamp=yesterday,
                type=ActivityType.CREATED,
                text="Task created and assigned to Art Director",
                author=OperatorLevel.ELEVATED,
            ),
            ActivityEntry(
                timestamp=stamp,
                type=ActivityType.STAGE_ADVANCE,
                from_stage="BRIEFED",
                to_stage="IN PRODUCTION",
                text="Advanced from BRIEFED to IN PRODUCTION",
                author=OperatorLevel.STANDARD,
            ),
        ),
        created_at=yesterday,
        updated_at=stamp,
    )
    opening = Post(
        id=1,
        client_id=1,
        platforms=("instagram",),
        post_type="Static Post",
        content_pillar="Exhibition Announcements",
        template_type="Template B",
        hook="DO NOT MISS THE OPENING NIGHT...",
        caption_body="Join us this Friday for the opening of our new neo-classical exhibition.",
        cta="Link in bio to RSVP",
        cta_type="Link in bio",
        hashtags="#mozarthouse #artexhibition #lahore",
        visual_brief="High-contrast elegant graphic using the Template B layout.",
        scheduled_date=day(now + timedelta(days=5)),
        scheduled_time="10:00",
        status="PLANNED",
        assigned_to="Art Director",
        activity_log=(
            ActivityEntry(
                timestamp=stamp,
                type=ActivityType.CREATED,
                text="Post planned",
                author=OperatorLevel.ELEVATED,
            ),
        ),
        created_at=stamp,
        updated_at=stamp,
    )
    return Snapshot(
        clients=(mozart, yz),
        tasks=(audit,),
        posts=(opening,),
        onboardings=(),
        protocols=_library(stamp),
        settings=Settings(),
    )
