# valbot/context.py
import asyncio
from typing import Awaitable, Callable, Optional

import httpx

from valbot import config
from valbot.assets_client import AssetsClient
from valbot.links import LinkStore
from valbot.riot_client import RiotClient
from valbot.util.rate_gate import RateGate
from valbot.util.ttl_cache import TTLCache


class AppContext:
  """Owns the shared state every command touches: one cache, one rate gate,
  one link store and the two upstream clients. Built once at startup (or per
  test) and passed to handlers explicitly."""

  def __init__(
      self,
      *,
      api_key: str,
      links: LinkStore,
      default_region: str = config.RIOT_REGION,
      default_shard: str = config.VAL_SHARD,
      cache: Optional[TTLCache] = None,
      gate: Optional[RateGate] = None,
      riot_http: Optional[httpx.AsyncClient] = None,
      assets_http: Optional[httpx.AsyncClient] = None,
      sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
  ):
    self.links = links
    self.default_region = default_region
    self.default_shard = default_shard
    self.cache = cache if cache is not None else TTLCache()
    self.gate = gate if gate is not None else RateGate(config.RATE_CAPACITY, config.RATE_REFILL_SEC, config.RATE_BACKOFF_SEC)
    self.riot = RiotClient(api_key, gate=self.gate, cache=self.cache, client=riot_http, sleep=sleep)
    self.assets = AssetsClient(cache=self.cache, client=assets_http)

  @classmethod
  def from_env(cls) -> "AppContext":
    config.require("RIOT_API_KEY")
    return cls(api_key=config.RIOT_API_KEY, links=LinkStore(config.LINKS_PATH))

  async def __aenter__(self):
    await self.riot.__aenter__()
    await self.assets.__aenter__()
    return self

  async def __aexit__(self, *exc):
    await self.assets.__aexit__(*exc)
    await self.riot.__aexit__(*exc)
