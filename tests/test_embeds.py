import discord
import pytest

from valbot.bot.embeds import followup_kwargs, message_kwargs, to_embed
from valbot.models import EmbedField, EmbedSpec, LinkButton, Reply
from valbot.services.render import format_duration, mode_name, tracker_url


def test_format_duration_and_mode_names():
  assert format_duration(1_845_000) == "30m 45s"
  assert format_duration(None) == "—"
  assert mode_name("spikerush") == "Spike Rush"
  assert mode_name("ggteam") == "Escalation"
  assert mode_name("hurm") == "Team Deathmatch"
  assert mode_name("newmode") == "newmode"


def test_tracker_url_escapes_riot_id():
  assert tracker_url("Nick Name", "EU W") == \
      "https://tracker.gg/valorant/profile/riot/Nick%20Name%23EU%20W/overview"


def test_to_embed_copies_fields_and_clips_long_values():
  spec = EmbedSpec(
      title="Valorant — Nick#TAG",
      description="desc",
      fields=[EmbedField(name="K/D/A", value="1/2/3", inline=True), EmbedField(name="Long", value="x" * 2000)],
      thumbnail="https://example.com/t.png",
      footer="footer",
  )
  e = to_embed(spec)
  assert isinstance(e, discord.Embed)
  assert e.title == spec.title
  assert e.fields[0].inline is True
  assert len(e.fields[1].value) == 1024
  assert e.thumbnail.url == "https://example.com/t.png"
  assert e.footer.text == "footer"


@pytest.mark.asyncio()
async def test_message_kwargs_with_buttons():
  reply = Reply(content="hi", buttons=[LinkButton(label="Tracker.gg profile", url="https://tracker.gg/x")])
  kwargs = message_kwargs(reply)
  assert kwargs["content"] == "hi"
  assert kwargs["embed"] is None
  button = kwargs["view"].children[0]
  assert button.url == "https://tracker.gg/x"
  assert button.style is discord.ButtonStyle.link


def test_message_kwargs_plain_text():
  kwargs = message_kwargs(Reply(content="No matches found."))
  assert kwargs == {"content": "No matches found.", "embed": None, "view": None}


def test_followup_kwargs_drops_empty_embed_and_view():
  assert followup_kwargs(Reply(content="hi", ephemeral=True)) == {"content": "hi"}
