# valbot/bot/embeds.py
from typing import Any, Dict, List, Optional

import discord

from valbot.models import EmbedSpec, LinkButton, Reply

FIELD_LIMIT = 1024
DESC_LIMIT = 4096


def _clip(s: str, limit: int) -> str:
  return s if len(s) <= limit else s[: limit - 1] + "…"


def to_embed(spec: EmbedSpec) -> discord.Embed:
  e = discord.Embed(
      title=spec.title,
      description=_clip(spec.description, DESC_LIMIT) if spec.description else None,
      timestamp=discord.utils.utcnow() if spec.timestamp else None,
  )
  for f in spec.fields:
    e.add_field(name=f.name, value=_clip(f.value or "—", FIELD_LIMIT), inline=f.inline)
  if spec.thumbnail:
    e.set_thumbnail(url=spec.thumbnail)
  if spec.image:
    e.set_image(url=spec.image)
  if spec.footer:
    e.set_footer(text=spec.footer)
  return e


def to_view(buttons: List[LinkButton]) -> Optional[discord.ui.View]:
  if not buttons:
    return None
  view = discord.ui.View()
  for b in buttons:
    view.add_item(discord.ui.Button(label=b.label, url=b.url, style=discord.ButtonStyle.link))
  return view


def message_kwargs(reply: Reply) -> Dict[str, Any]:
  """kwargs for Interaction.edit_original_response."""
  return {
    "content": reply.content,
    "embed": to_embed(reply.embed) if reply.embed else None,
    "view": to_view(reply.buttons),
  }


def followup_kwargs(reply: Reply) -> Dict[str, Any]:
  """kwargs for Interaction.followup.send, which rejects None for embed/view."""
  return {k: v for k, v in message_kwargs(reply).items() if v is not None}
