# valbot/util/ttl_cache.py
import asyncio
import time
from typing import Any, Callable, Dict, Optional, Tuple

MISSING = object()  # get() result for absent / expired keys


class TTLCache:
  """Key -> value store with per-entry expiry, checked lazily on read.

  Also tracks in-flight fetches so concurrent misses on the same key can
  await one upstream call instead of issuing their own.
  """

  def __init__(self, clock: Callable[[], float] = time.monotonic):
    self._clock = clock
    self._m: Dict[str, Tuple[float, Any]] = {}
    self._inflight: Dict[str, asyncio.Future] = {}

  def get(self, k: str) -> Any:
    v = self._m.get(k)
    if v is None:
      return MISSING
    exp, payload = v
    if self._clock() > exp:
      self._m.pop(k, None)
      return MISSING
    return payload

  def put(self, k: str, payload: Any, ttl: float) -> None:
    self._m[k] = (self._clock() + ttl, payload)

  def __len__(self) -> int:
    return len(self._m)

  # -------- in-flight coalescing --------
  def inflight_get(self, k: str) -> Optional[asyncio.Future]:
    return self._inflight.get(k)

  def inflight_set(self, k: str) -> asyncio.Future:
    fut = asyncio.get_running_loop().create_future()
    self._inflight[k] = fut
    return fut

  def inflight_resolve(self, k: str, value: Any = None, exc: Optional[BaseException] = None) -> None:
    fut = self._inflight.pop(k, None)
    if fut and not fut.done():
      if exc is not None:
        fut.set_exception(exc)
        # waiters re-raise it; keep the loop from reporting it as unretrieved
        fut.exception()
      else:
        fut.set_result(value)
