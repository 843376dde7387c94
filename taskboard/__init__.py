"""Taskboard: multi-tenant to-do list backend."""

__version__ = "1.0.0"
