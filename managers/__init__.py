"""
Managers for the interaction bot.
"""
