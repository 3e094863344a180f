"""
Main Discord bot application.
Initializes and runs the crypto price alert bot.
"""

import sys

import discord
from discord.ext import commands
from dotenv import load_dotenv

from .api.request_utilities import get_env_var
from .cog import setup as setup_crypto_alerts
from .logging_setup import get_logger

# Load variables from .env file into environment variables
load_dotenv()

# Create module logger
logger = get_logger("bot")

# Setup bot with intents; the cog provides its own help command
intents = discord.Intents.default()
intents.message_content = True
bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)


@bot.event
async def setup_hook():
    """Load the cog once, before connecting"""
    try:
        await setup_crypto_alerts(bot)
        logger.info("Crypto alerts loaded!")
    except Exception as e:
        logger.error(f"Error loading crypto alerts: {e}")


@bot.event
async def on_ready():
    """Called when bot is ready and connected to Discord"""
    logger.info(f"Bot is connected! Logged in as {bot.user}")
    logger.info(f"Bot is in {len(bot.guilds)} servers")


@bot.command(name="ping")
async def ping_command(ctx):
    """Simple ping command to test if bot is responsive"""
    logger.debug(f"Ping command received from {ctx.author}")
    await ctx.send("Pong! Bot is working!")


def main():
    try:
        token = get_env_var("DISCORD_TOKEN", required=True)
    except ValueError:
        logger.critical("ERROR: DISCORD_TOKEN environment variable not set!")
        sys.exit(1)

    logger.info("Starting bot...")
    try:
        bot.run(token, log_handler=None)
    except discord.LoginFailure as e:
        logger.critical(f"Failed to start bot: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
