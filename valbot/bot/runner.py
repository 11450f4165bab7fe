# valbot/bot/runner.py - Discord bot launcher
from __future__ import annotations

import asyncio
import logging
import sys

import discord
from discord.ext import commands

from valbot import config
from valbot.bot.cog import setup
from valbot.context import AppContext

log = logging.getLogger("bot")


class ValBot(commands.Bot):
  def __init__(self):
    intents = discord.Intents.default()
    super().__init__(command_prefix="!", intents=intents)

  async def on_ready(self) -> None:
    log.info("Logged in as %s (%s)", self.user, self.user.id)
    if config.GUILD_ID:
      guild = discord.Object(id=int(config.GUILD_ID))
      self.tree.copy_global_to(guild=guild)
      await self.tree.sync(guild=guild)
      log.info("Slash-commands synced for guild %s", config.GUILD_ID)
    else:
      await self.tree.sync()
      log.info("Slash-commands synced globally")


async def run() -> None:
  bot = ValBot()

  @bot.tree.error
  async def app_command_error(inter: discord.Interaction, err: Exception):
    log.error("Slash-cmd error: %s - %s", type(err).__name__, err)

  async with AppContext.from_env() as ctx:
    await setup(bot, ctx)
    async with bot:
      await bot.start(config.DISCORD_TOKEN)


def main() -> None:
  logging.basicConfig(
      level=logging.INFO,
      format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
      stream=sys.stdout,
      force=True,
  )
  config.require("DISCORD_TOKEN", "RIOT_API_KEY")
  try:
    asyncio.run(run())
  except KeyboardInterrupt:
    log.info("Shutting down")


if __name__ == "__main__":
  main()
