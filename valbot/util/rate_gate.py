# valbot/util/rate_gate.py
import asyncio
import time
from typing import Awaitable, Callable


class RateGate:
  """Token bucket shared by every Riot account/match call.

  The bucket refills to full capacity once more than `refill_sec` has passed
  since the last refill (no trickle). A caller that finds it empty sleeps
  `backoff_sec` and checks again; nobody is rejected.
  """

  def __init__(
      self,
      capacity: int = 20,
      refill_sec: float = 10.0,
      backoff_sec: float = 0.5,
      *,
      clock: Callable[[], float] = time.monotonic,
      sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
  ):
    self.capacity = capacity
    self.refill_sec = refill_sec
    self.backoff_sec = backoff_sec
    self._clock = clock
    self._sleep = sleep
    self.tokens = capacity
    self.last_refill = clock()
    self.lock = asyncio.Lock()

  def _try_take(self) -> bool:
    now = self._clock()
    if now - self.last_refill > self.refill_sec:
      self.tokens = self.capacity
      self.last_refill = now
    if self.tokens > 0:
      self.tokens -= 1
      return True
    return False

  async def acquire(self) -> None:
    while True:
      async with self.lock:
        if self._try_take():
          return
      # sleep outside lock to let others progress
      await self._sleep(self.backoff_sec)
