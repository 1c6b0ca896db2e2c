"""Interface adapters for presenting dashboard data."""

__all__ = []
