"""
Cryptocurrency price alert bot.
Price lookups, simple per-user portfolios and one-shot price crossing alerts.
"""

__version__ = "0.1.0"
