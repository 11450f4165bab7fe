# valbot/links.py
import json
import logging
import time
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import ValidationError

from valbot.models import Link

log = logging.getLogger("links")


def load_links(path: Path) -> Dict[str, Link]:
  if not path.exists():
    return {}
  try:
    raw = json.loads(path.read_text(encoding="utf-8"))
  except (OSError, json.JSONDecodeError) as e:
    log.warning("Could not read %s (%s), starting with no links", path, e)
    return {}
  out: Dict[str, Link] = {}
  for user_id, rec in (raw or {}).items():
    try:
      out[str(user_id)] = Link.model_validate(rec)
    except ValidationError:
      log.warning("Dropping malformed link record for %s", user_id)
  return out


def save_links(path: Path, links: Dict[str, Link]) -> bool:
  data = {uid: link.model_dump(exclude_none=True) for uid, link in links.items()}
  try:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return True
  except OSError as e:
    log.error("Save error for %s: %s", path, e)
    return False


class LinkStore:
  """Discord user id -> Link, mirrored to a JSON file.

  The in-memory dict is authoritative; a failed write is logged and the
  process keeps going with what it has.
  """

  def __init__(self, path: Union[str, Path, None] = None):
    self.path = Path(path) if path else None
    self._links: Dict[str, Link] = load_links(self.path) if self.path else {}

  def _save(self) -> bool:
    if self.path is None:
      return True
    return save_links(self.path, self._links)

  def get(self, user_id: str) -> Optional[Link]:
    return self._links.get(str(user_id))

  def link(self, user_id: str, game_name: str, tag_line: str, *, shard: str, region: str) -> Link:
    rec = Link(
        gameName=game_name,
        tagLine=tag_line,
        shard=shard,
        region=region,
        lastLinkedAt=int(time.time() * 1000),
    )
    self._links[str(user_id)] = rec
    self._save()
    return rec

  def unlink(self, user_id: str) -> bool:
    existed = self._links.pop(str(user_id), None) is not None
    self._save()
    return existed

  def set_shard(self, user_id: str, shard: str) -> Link:
    rec = self._links.get(str(user_id)) or Link()
    rec = rec.model_copy(update={"shard": shard})
    self._links[str(user_id)] = rec
    self._save()
    return rec

  def set_region(self, user_id: str, region: str) -> Link:
    rec = self._links.get(str(user_id)) or Link()
    rec = rec.model_copy(update={"region": region})
    self._links[str(user_id)] = rec
    self._save()
    return rec

  def __len__(self) -> int:
    return len(self._links)
