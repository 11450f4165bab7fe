# valbot/assets_client.py
import logging
from typing import Any, Dict, Optional

import httpx

from valbot import config
from valbot.errors import UpstreamHTTPError, UpstreamNetworkError
from valbot.riot_client import default_http_client
from valbot.util.ttl_cache import MISSING, TTLCache

log = logging.getLogger("assets_client")

VAL_STATIC_BASE = "https://valorant-api.com/v1"


def map_tail(map_path: Optional[str], default: str = "map") -> str:
  """'/Game/Maps/Ascent/Ascent' -> 'ascent'."""
  tail = (map_path or "").rstrip("/").split("/")[-1]
  return (tail or default).lower()


def agent_by_uuid(roster: Dict[str, dict], uuid: Optional[str]) -> Optional[dict]:
  u = (uuid or "").lower()
  if not u:
    return None
  for a in roster.values():
    if (a.get("uuid") or "").lower() == u:
      return a
  return None


class AssetsClient:
  """valorant-api.com rosters. Not rate gated; each roster is cached whole."""

  def __init__(self, *, cache: TTLCache, client: Optional[httpx.AsyncClient] = None,
               ttl: float = config.STATIC_TTL, base_url: str = VAL_STATIC_BASE):
    self.cache = cache
    self.ttl = ttl
    self.base_url = base_url
    self._client = client
    self._owns_client = client is None

  async def __aenter__(self):
    if self._client is None:
      self._client = default_http_client()
    return self

  async def __aexit__(self, *exc):
    if self._client and self._owns_client:
      await self._client.aclose()
      self._client = None

  async def _fetch(self, path: str, params: Optional[dict] = None) -> Any:
    if self._client is None:
      raise RuntimeError("AssetsClient used outside 'async with'")
    try:
      r = await self._client.get(f"{self.base_url}{path}", params=params)
    except httpx.TransportError as e:
      raise UpstreamNetworkError(str(e) or type(e).__name__, service="valorant-api") from e
    if r.is_error:
      raise UpstreamHTTPError(r.status_code, r.text[:200] or None, service="valorant-api")
    return r.json()

  async def agents(self) -> Dict[str, dict]:
    """Playable agents keyed by lower-cased display name."""
    key = "static:agents"
    hit = self.cache.get(key)
    if hit is not MISSING:
      return hit
    data = await self._fetch("/agents", params={"isPlayableCharacter": "true"})
    by_name = {}
    for a in data.get("data") or []:
      name = a.get("displayName")
      if name:
        by_name[name.lower()] = a
    log.info("Loaded %d agents", len(by_name))
    self.cache.put(key, by_name, self.ttl)
    return by_name

  async def maps(self) -> Dict[str, dict]:
    """Maps keyed by lower-cased mapUrl tail (matches matchInfo.mapId)."""
    key = "static:maps"
    hit = self.cache.get(key)
    if hit is not MISSING:
      return hit
    data = await self._fetch("/maps")
    by_tail = {}
    for m in data.get("data") or []:
      by_tail[map_tail(m.get("mapUrl"), default="")] = m
    by_tail.pop("", None)
    log.info("Loaded %d maps", len(by_tail))
    self.cache.put(key, by_tail, self.ttl)
    return by_tail
