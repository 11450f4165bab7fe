# valbot/riot_client.py
import asyncio
import logging
from urllib.parse import quote
from typing import Any, Awaitable, Callable, Optional

import httpx

from valbot import config
from valbot.errors import (
  InvalidRoutingError,
  RateLimitExhausted,
  UpstreamHTTPError,
  UpstreamNetworkError,
)
from valbot.models import Account
from valbot.util.rate_gate import RateGate
from valbot.util.ttl_cache import MISSING, TTLCache

log = logging.getLogger("riot_client")

BODY_EXCERPT = 200


def default_http_client() -> httpx.AsyncClient:
  limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)
  # Small connect timeout; generous read timeout because match bodies are a bit larger
  return httpx.AsyncClient(timeout=httpx.Timeout(15.0, connect=5.0), limits=limits)


class RiotClient:
  """Riot account (region-scoped) and VAL match (shard-scoped) endpoints."""

  def __init__(
      self,
      api_key: str,
      *,
      gate: RateGate,
      cache: TTLCache,
      client: Optional[httpx.AsyncClient] = None,
      retries: int = config.RIOT_RETRIES,
      matchlist_ttl: float = config.MATCHLIST_TTL,
      match_ttl: float = config.MATCH_TTL,
      sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
  ):
    self.api_key = api_key
    self.gate = gate
    self.cache = cache
    self.retries = retries
    self.matchlist_ttl = matchlist_ttl
    self.match_ttl = match_ttl
    self._sleep = sleep
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

  @staticmethod
  def norm_region(region: str) -> str:
    r = (region or "").strip().lower()
    if r not in config.REGIONS:
      raise InvalidRoutingError("region", region, config.REGIONS)
    return r

  @staticmethod
  def norm_shard(shard: str) -> str:
    s = (shard or "").strip().lower()
    if s not in config.SHARDS:
      raise InvalidRoutingError("shard", shard, config.SHARDS)
    return s

  async def _request(self, url: str) -> Any:
    """
    GET with:
      - rate gate permit per attempt,
      - Retry-After backoff for 429 (bounded by self.retries),
      - no retry for any other failure.
    """
    if self._client is None:
      raise RuntimeError("RiotClient used outside 'async with'")

    headers = {"X-Riot-Token": self.api_key, "Accept": "application/json"}
    retries_left = self.retries
    while True:
      await self.gate.acquire()
      try:
        r = await self._client.get(url, headers=headers)
      except httpx.TransportError as e:
        raise UpstreamNetworkError(str(e) or type(e).__name__) from e
      if r.status_code == 429:
        if retries_left <= 0:
          raise RateLimitExhausted(url)
        retries_left -= 1
        try:
          retry_after = float(r.headers.get("Retry-After", "1"))
        except ValueError:
          retry_after = 1.0
        log.info("429 from Riot, retrying in %.1fs (%d left)", retry_after, retries_left)
        await self._sleep(retry_after)
        continue
      if r.is_error:
        raise UpstreamHTTPError(r.status_code, r.text[:BODY_EXCERPT] or None)
      return r.json()

  async def _get(self, url: str, *, cache_key: Optional[str] = None, ttl: float = 0) -> Any:
    if not cache_key:
      return await self._request(url)

    hit = self.cache.get(cache_key)
    if hit is not MISSING:
      return hit
    inflight = self.cache.inflight_get(cache_key)
    if inflight:
      return await inflight  # share the same request

    self.cache.inflight_set(cache_key)
    try:
      data = await self._request(url)
    except BaseException as e:
      self.cache.inflight_resolve(cache_key, exc=e)
      raise
    if ttl > 0:
      self.cache.put(cache_key, data, ttl)
    self.cache.inflight_resolve(cache_key, value=data)
    return data

  # -------- Account via REGION --------
  async def account_by_riot_id(self, region: str, game_name: str, tag_line: str) -> Account:
    reg = self.norm_region(region)
    url = (f"https://{reg}.api.riotgames.com/riot/account/v1/accounts/by-riot-id/"
           f"{quote(game_name, safe='')}/{quote(tag_line, safe='')}")
    data = await self._get(url)
    return Account(
        gameName=data.get("gameName") or game_name,
        tagLine=data.get("tagLine") or tag_line,
        puuid=data["puuid"],
    )

  # -------- Match IDs via SHARD --------
  async def match_ids(self, shard: str, puuid: str, *, start: int = 0, count: int = 5) -> list[str]:
    sh = self.norm_shard(shard)
    url = f"https://{sh}.api.riotgames.com/val/match/v1/matchlists/by-puuid/{puuid}"
    data = await self._get(url, cache_key=f"matchlist:{sh}:{puuid}", ttl=self.matchlist_ttl)
    history = (data or {}).get("history") or []
    return [h["matchId"] for h in history[start:start + count] if h.get("matchId")]

  # -------- Match detail via SHARD --------
  async def match(self, shard: str, match_id: str) -> dict:
    sh = self.norm_shard(shard)
    url = f"https://{sh}.api.riotgames.com/val/match/v1/matches/{match_id}"
    return await self._get(url, cache_key=f"match:{sh}:{match_id}", ttl=self.match_ttl)
