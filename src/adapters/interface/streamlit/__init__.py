"""Streamlit interface for the dashboard."""

__all__ = []
