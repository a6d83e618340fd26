"""Telegram bot that prices marketplace orders in roubles, with exchange rates cached in Redis."""

__version__ = "0.1.0"