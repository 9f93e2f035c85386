"""Agency snapshot: derived dashboard views."""

from .generator import AgencySnapshotGenerator

__all__ = ["AgencySnapshotGenerator"]
