"""Client truth: derived client health."""

from .health_calculator import (
    ClientHealth,
    HealthCalculator,
    compute_health,
    is_overdue,
    resolve_health,
)

__all__ = ["ClientHealth", "HealthCalculator", "compute_health", "is_overdue", "resolve_health"]
