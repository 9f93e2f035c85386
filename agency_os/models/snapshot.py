"""The whole domain state, persisted as one document."""

from dataclasses import dataclass, field, replace

from .base import Record, pick
from .client import Client
from .knowledge import KnowledgeEntry
from .onboarding import OnboardingProtocol
from .post import Post
from .task import Task


@dataclass(frozen=True)
class AccessPhraseHashes(Record):
    elevated: str | None = None
    standard: str | None = None


@dataclass(frozen=True)
class Settings(Record):
    initialized: bool = False
    access_phrase_hashes: AccessPhraseHashes = field(default_factory=AccessPhraseHashes)
    last_updated: str | None = None

    @classmethod
    def from_dict(cls, row: dict) -> "Settings":
        hashes = pick(row, "access_phrase_hashes") or {}
        return cls(
            initialized=bool(pick(row, "initialized", False)),
            access_phrase_hashes=AccessPhraseHashes(
                # older documents stored the hashes flat on settings
                elevated=hashes.get("elevated") or pick(row, "ceo_phrase_hash"),
                standard=hashes.get("standard") or pick(row, "team_phrase_hash"),
            ),
            last_updated=pick(row, "last_updated"),
        )


COLLECTIONS = ("clients", "tasks", "posts", "onboardings", "protocols")


@dataclass(frozen=True)
class Snapshot(Record):
    clients: tuple[Client, ...] = ()
    tasks: tuple[Task, ...] = ()
    posts: tuple[Post, ...] = ()
    onboardings: tuple[OnboardingProtocol, ...] = ()
    protocols: tuple[KnowledgeEntry, ...] = ()
    settings: Settings = field(default_factory=Settings)

    def client(self, client_id: int) -> Client | None:
        return next((c for c in self.clients if c.id == client_id), None)

    def task(self, task_id: int) -> Task | None:
        return next((t for t in self.tasks if t.id == task_id), None)

    def post(self, post_id: int) -> Post | None:
        return next((p for p in self.posts if p.id == post_id), None)

    def protocol(self, entry_id: int) -> KnowledgeEntry | None:
        return next((e for e in self.protocols if e.id == entry_id), None)

    def onboarding(self, protocol_id: str) -> OnboardingProtocol | None:
        return next((o for o in self.onboardings if o.id == protocol_id), None)

    def onboarding_for(self, client_id: int) -> OnboardingProtocol | None:
        return next((o for o in self.onboardings if o.client_id == client_id), None)

    def with_(self, **changes) -> "Snapshot":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, doc: dict) -> "Snapshot":
        return cls(
            clients=tuple(Client.from_dict(r) for r in doc.get("clients") or ()),
            tasks=tuple(Task.from_dict(r) for r in doc.get("tasks") or ()),
            posts=tuple(Post.from_dict(r) for r in doc.get("posts") or ()),
            onboardings=tuple(OnboardingProtocol.from_dict(r) for r in doc.get("onboardings") or ()),
            protocols=tuple(KnowledgeEntry.from_dict(r) for r in doc.get("protocols") or ()),
            settings=Settings.from_dict(doc.get("settings") or {}),
        )
