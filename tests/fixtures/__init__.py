"""Shared test fixtures: a fixed clock and seeded snapshots."""

from .snapshots import NOW, make_client, make_task, run, seeded_snapshot

__all__ = ["NOW", "make_client", "make_task", "run", "seeded_snapshot"]
