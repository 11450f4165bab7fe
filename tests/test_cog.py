from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.factories import ACCOUNT_HOST, MATCH_HOST, PUUID
from valbot.bot.cog import ValorantCog

LIST_PATH = f"/val/match/v1/matchlists/by-puuid/{PUUID}"


def fake_interaction(user_id: int = 100):
  return SimpleNamespace(
      user=SimpleNamespace(id=user_id),
      response=SimpleNamespace(defer=AsyncMock()),
      edit_original_response=AsyncMock(),
      delete_original_response=AsyncMock(),
      followup=SimpleNamespace(send=AsyncMock()),
  )


@pytest.fixture()
def cog(ctx):
  return ValorantCog(MagicMock(), ctx)


@pytest.mark.asyncio()
async def test_not_linked_nudge_on_public_command_is_sent_privately(cog, upstream):
  i = fake_interaction()
  await ValorantCog.profile.callback(cog, i)

  i.response.defer.assert_awaited_once_with(ephemeral=False, thinking=True)
  i.delete_original_response.assert_awaited_once()
  i.edit_original_response.assert_not_awaited()
  i.followup.send.assert_awaited_once_with(ephemeral=True, content="You have no linked Riot ID. Use /link Nick#TAG")
  assert upstream.calls == []


@pytest.mark.asyncio()
async def test_private_command_edits_its_ephemeral_deferral(cog):
  cog.ctx.links.link("100", "Nick", "TAG", shard="eu", region="europe")
  i = fake_interaction()
  await ValorantCog.me.callback(cog, i)

  i.response.defer.assert_awaited_once_with(ephemeral=True, thinking=True)
  i.delete_original_response.assert_not_awaited()
  i.followup.send.assert_not_awaited()
  kwargs = i.edit_original_response.await_args.kwargs
  assert kwargs["content"].startswith("Linked: **Nick#TAG**")


@pytest.mark.asyncio()
async def test_public_reply_edits_original_response(cog, upstream):
  cog.ctx.links.link("100", "Nick", "TAG", shard="eu", region="europe")
  upstream.json(ACCOUNT_HOST, "/riot/account/v1/accounts/by-riot-id/Nick/TAG",
                {"puuid": PUUID, "gameName": "Nick", "tagLine": "TAG"})
  upstream.json(MATCH_HOST, LIST_PATH, {"puuid": PUUID, "history": []})
  i = fake_interaction()
  await ValorantCog.lastmatch.callback(cog, i)

  i.followup.send.assert_not_awaited()
  i.edit_original_response.assert_awaited_once_with(content="No matches found.", embed=None, view=None)
