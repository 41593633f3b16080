"""Keyboard layouts for the Telegram bot."""

from .main_menu import get_category_keyboard

__all__ = ["get_category_keyboard"]
