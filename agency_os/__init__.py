"""
Agency OS - domain state engine for an agency operations dashboard.

Clients, fulfillment tasks, content posts, onboarding checklists and a
knowledge vault, all mutated through one pure reducer.
"""

__version__ = "1.0.0"
