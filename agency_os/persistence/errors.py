"""Persistence errors."""


class PersistenceError(Exception):
    """A durable read or write failed."""
