"""Keyboard layouts for the Telegram bot"""

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from services.submissions import Category

CATEGORY_BUTTONS = {
    Category.PROBLEM_REPORT: "Сообщить о проблеме",
    Category.SUGGESTION: "Сделать предложение",
}


def get_category_keyboard() -> InlineKeyboardMarkup:
    """Start menu: one button per submission category"""
    keyboard = [
        [InlineKeyboardButton(text=text, callback_data=category.value)]
        for category, text in CATEGORY_BUTTONS.items()
    ]
    return InlineKeyboardMarkup(inline_keyboard=keyboard)
