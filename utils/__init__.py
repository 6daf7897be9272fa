"""
Utility modules for the interaction bot.
"""

from .logger import LoggerMixin, get_logger, setup_logging
from .discord import ChatInputCommand, ComponentInteraction, DiscordUtils, InteractionEvent
from .monitoring import Monitoring
from .error_handler import ErrorHandler

__all__ = [
    "LoggerMixin",
    "get_logger",
    "setup_logging",
    "ChatInputCommand",
    "ComponentInteraction",
    "DiscordUtils",
    "InteractionEvent",
    "Monitoring",
    "ErrorHandler",
]
