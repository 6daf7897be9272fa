"""
Discord interaction bot: slash-command dispatch with per-user cooldowns.
"""

__version__ = "1.0.0"
__description__ = "Discord interaction bot using discord.py"

__all__ = ["__version__"]
