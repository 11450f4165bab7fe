import httpx
import pytest
import pytest_asyncio

from tests.factories import AGENTS_PAYLOAD, MAPS_PAYLOAD, FakeUpstream
from valbot.context import AppContext
from valbot.links import LinkStore
from valbot.util.rate_gate import RateGate
from valbot.util.ttl_cache import TTLCache


class FakeClock:
  def __init__(self, t: float = 1000.0):
    self.t = t

  def __call__(self) -> float:
    return self.t

  def advance(self, seconds: float) -> None:
    self.t += seconds


@pytest.fixture()
def clock():
  return FakeClock()


class SleepLog(list):
  """Recorded sleep durations; sleeping advances the fake clock."""

  def __init__(self, clock: FakeClock):
    super().__init__()
    self.clock = clock

  async def sleep(self, seconds: float) -> None:
    self.append(seconds)
    self.clock.advance(seconds)


@pytest.fixture()
def sleeps(clock):
  return SleepLog(clock)


@pytest.fixture()
def upstream():
  up = FakeUpstream()
  up.json("valorant-api.com", "/v1/agents", AGENTS_PAYLOAD)
  up.json("valorant-api.com", "/v1/maps", MAPS_PAYLOAD)
  return up


@pytest_asyncio.fixture()
async def make_ctx(tmp_path, clock, upstream):
  clients = []

  def _make(links=None, gate=None) -> AppContext:
    recorded = SleepLog(clock)
    transport = httpx.MockTransport(upstream)
    riot_http = httpx.AsyncClient(transport=transport)
    assets_http = httpx.AsyncClient(transport=transport)
    clients.extend((riot_http, assets_http))
    ctx = AppContext(
        api_key="test-key",
        links=links if links is not None else LinkStore(tmp_path / "links.json"),
        default_region="europe",
        default_shard="eu",
        cache=TTLCache(clock=clock),
        gate=gate if gate is not None else RateGate(20, 10.0, 0.5, clock=clock, sleep=recorded.sleep),
        riot_http=riot_http,
        assets_http=assets_http,
        sleep=recorded.sleep,
    )
    ctx.sleeps = recorded
    return ctx

  yield _make
  for c in clients:
    await c.aclose()


@pytest.fixture()
def ctx(make_ctx):
  return make_ctx()
