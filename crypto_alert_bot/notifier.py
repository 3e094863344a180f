"""
Delivery of text messages to users.
"""

from typing import Protocol

import discord
from loguru import logger


class Notifier(Protocol):
    """Anything that can deliver a text message to a user id"""

    async def send(self, user_id: int, text: str) -> bool:
        ...


class DiscordNotifier:
    """Sends messages to users as Discord direct messages"""

    def __init__(self, bot: discord.Client):
        """
        Initialize the notifier.

        Args:
            bot: Connected Discord client
        """
        self.bot = bot

    async def send(self, user_id: int, text: str) -> bool:
        """
        Send a direct message. Failures are logged and not retried.

        Returns:
            Whether the message was delivered
        """
        try:
            user = self.bot.get_user(user_id) or await self.bot.fetch_user(user_id)
            await user.send(text)
            logger.debug(f"Sent message to user {user_id}")
            return True
        except discord.DiscordException as e:
            logger.error(f"Failed to send message to user {user_id}: {str(e)}")
            return False
        except Exception as e:
            logger.error(f"Error sending message to user {user_id}: {str(e)}")
            return False
