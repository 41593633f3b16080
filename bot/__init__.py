"""Telegram bot package."""

from .relay_bot import RelayBot

__all__ = ["RelayBot"]
