"""Aggregate bot handlers for dispatch registration."""

from .intake import IntakeHandler, setup_intake_handlers

__all__ = [
    "IntakeHandler",
    "setup_intake_handlers",
]
