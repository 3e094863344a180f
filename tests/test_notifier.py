from unittest.mock import AsyncMock, MagicMock

import discord

from crypto_alert_bot.notifier import DiscordNotifier


class MockBot:
    """Mock Discord client that knows a single cached user"""

    def __init__(self, cached_user=None, fetched_user=None):
        self.cached_user = cached_user
        self.fetch_user = AsyncMock(return_value=fetched_user)

    def get_user(self, user_id):
        return self.cached_user


def make_user():
    user = MagicMock()
    user.send = AsyncMock()
    return user


async def test_send_to_cached_user():
    user = make_user()
    bot = MockBot(cached_user=user)

    assert await DiscordNotifier(bot).send(42, "hello") is True
    user.send.assert_awaited_once_with("hello")
    bot.fetch_user.assert_not_awaited()


async def test_send_fetches_uncached_user():
    user = make_user()
    bot = MockBot(fetched_user=user)

    assert await DiscordNotifier(bot).send(42, "hello") is True
    bot.fetch_user.assert_awaited_once_with(42)
    user.send.assert_awaited_once_with("hello")


async def test_send_failure_returns_false():
    user = make_user()
    user.send.side_effect = discord.DiscordException("Cannot send messages to this user")
    bot = MockBot(cached_user=user)

    assert await DiscordNotifier(bot).send(42, "hello") is False


async def test_send_connection_error_returns_false():
    user = make_user()
    user.send.side_effect = OSError("connection reset")
    bot = MockBot(cached_user=user)

    assert await DiscordNotifier(bot).send(42, "hello") is False
