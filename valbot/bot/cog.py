# valbot/bot/cog.py
from __future__ import annotations

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from valbot import config
from valbot.bot.embeds import followup_kwargs, message_kwargs
from valbot.context import AppContext
from valbot.services import handlers

log = logging.getLogger("cog.valorant")

QUEUE_CHOICES = [app_commands.Choice(name="(all)" if q == "any" else q, value=q) for q in config.QUEUES]
SHARD_CHOICES = [app_commands.Choice(name=s, value=s) for s in config.SHARDS]
REGION_CHOICES = [app_commands.Choice(name=r, value=r) for r in config.REGIONS]


def _val(choice: Optional[app_commands.Choice[str]]) -> Optional[str]:
  return choice.value if choice else None


class ValorantCog(commands.Cog):
  """
  /link /unlink /me /setshard /setregion: account linking
  /profile /lastmatch /agent-stats /map-stats: stats views
  """

  def __init__(self, bot: commands.Bot, ctx: AppContext):
    self.bot, self.ctx = bot, ctx

  async def _run(self, i: discord.Interaction, handler, *args, ephemeral: bool = False, **kwargs) -> None:
    # acknowledge first, the lookups can take longer than the 3s window
    await i.response.defer(ephemeral=ephemeral, thinking=True)
    reply = await handler(self.ctx, str(i.user.id), *args, **kwargs)
    if reply.ephemeral and not ephemeral:
      # a public deferral can't turn private; swap it for an ephemeral followup
      await i.delete_original_response()
      await i.followup.send(ephemeral=True, **followup_kwargs(reply))
      return
    await i.edit_original_response(**message_kwargs(reply))

  # ───────────────────────── linking ─────────────────────────
  @app_commands.command(name="link", description="Link your Discord profile to a Riot ID (Nick#TAG)")
  @app_commands.describe(riot_id="e.g. YourNick#EUW", shard="VAL match shard", region="account region")
  @app_commands.choices(shard=SHARD_CHOICES, region=REGION_CHOICES)
  async def link(self, i: discord.Interaction, riot_id: str,
                 shard: Optional[app_commands.Choice[str]] = None,
                 region: Optional[app_commands.Choice[str]] = None):
    await self._run(i, handlers.link, riot_id, _val(shard), _val(region), ephemeral=True)

  @app_commands.command(name="add", description="Alias for /link")
  @app_commands.describe(riot_id="e.g. YourNick#EUW", shard="VAL match shard", region="account region")
  @app_commands.choices(shard=SHARD_CHOICES, region=REGION_CHOICES)
  async def add(self, i: discord.Interaction, riot_id: str,
                shard: Optional[app_commands.Choice[str]] = None,
                region: Optional[app_commands.Choice[str]] = None):
    await self._run(i, handlers.link, riot_id, _val(shard), _val(region), ephemeral=True)

  @app_commands.command(name="unlink", description="Remove your Riot ID link")
  async def unlink(self, i: discord.Interaction):
    await self._run(i, handlers.unlink, ephemeral=True)

  @app_commands.command(name="me", description="Show which Riot ID you have linked")
  async def me(self, i: discord.Interaction):
    await self._run(i, handlers.me, ephemeral=True)

  @app_commands.command(name="setshard", description="Set your default VAL shard")
  @app_commands.choices(shard=SHARD_CHOICES)
  async def setshard(self, i: discord.Interaction, shard: app_commands.Choice[str]):
    await self._run(i, handlers.set_shard, shard.value, ephemeral=True)

  @app_commands.command(name="setregion", description="Set your default account region")
  @app_commands.choices(region=REGION_CHOICES)
  async def setregion(self, i: discord.Interaction, region: app_commands.Choice[str]):
    await self._run(i, handlers.set_region, region.value, ephemeral=True)

  # ───────────────────────── stats ─────────────────────────
  @app_commands.command(name="profile", description="Show a Valorant profile")
  @app_commands.describe(
      user="Discord user (optional)",
      riot_id="One-off Nick#TAG (skips the stored link)",
      queue="Filter by game mode",
  )
  @app_commands.choices(queue=QUEUE_CHOICES, shard=SHARD_CHOICES, region=REGION_CHOICES)
  async def profile(self, i: discord.Interaction,
                    user: Optional[discord.User] = None,
                    riot_id: Optional[str] = None,
                    queue: Optional[app_commands.Choice[str]] = None,
                    shard: Optional[app_commands.Choice[str]] = None,
                    region: Optional[app_commands.Choice[str]] = None):
    target = str((user or i.user).id)
    await self._run(i, handlers.profile, target, riot_id=riot_id, queue=_val(queue),
                    shard=_val(shard), region=_val(region))

  @app_commands.command(name="lastmatch", description="Show the last match")
  @app_commands.describe(user="Discord user (optional)")
  async def lastmatch(self, i: discord.Interaction, user: Optional[discord.User] = None):
    await self._run(i, handlers.last_match, str((user or i.user).id))

  @app_commands.command(name="agent-stats", description="Breakdown by agent")
  @app_commands.describe(user="Discord user (optional)", agent="e.g. Jett, Sova", queue="Filter by game mode")
  @app_commands.choices(queue=QUEUE_CHOICES)
  async def agent_stats(self, i: discord.Interaction,
                        user: Optional[discord.User] = None,
                        agent: Optional[str] = None,
                        queue: Optional[app_commands.Choice[str]] = None):
    await self._run(i, handlers.agent_stats, str((user or i.user).id), agent=agent, queue=_val(queue))

  @app_commands.command(name="map-stats", description="Breakdown by map")
  @app_commands.describe(user="Discord user (optional)", map="e.g. Ascent, Bind", queue="Filter by game mode")
  @app_commands.choices(queue=QUEUE_CHOICES)
  async def map_stats(self, i: discord.Interaction,
                      user: Optional[discord.User] = None,
                      map: Optional[str] = None,
                      queue: Optional[app_commands.Choice[str]] = None):
    await self._run(i, handlers.map_stats, str((user or i.user).id), map_name=map, queue=_val(queue))


async def setup(bot: commands.Bot, ctx: AppContext) -> None:
  await bot.add_cog(ValorantCog(bot, ctx))
