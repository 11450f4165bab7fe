# valbot/errors.py
from typing import Optional


class ValbotError(Exception):
  """Base for failures that end up as a user-visible message."""

  def __init__(self, message: str):
    super().__init__(message)
    self.message = message


class RiotIdParseError(ValbotError):
  def __init__(self, raw: str):
    super().__init__("Invalid Riot ID format. Use e.g. \"Nick#TAG\".")
    self.raw = raw


class NotLinkedError(ValbotError):
  """Target user has no stored Riot ID. `is_self` picks the nudge wording."""

  def __init__(self, target_id: str, is_self: bool):
    if is_self:
      msg = "You have no linked Riot ID. Use /link Nick#TAG"
    else:
      msg = f"<@{target_id}> has no linked Riot ID."
    super().__init__(msg)
    self.target_id = target_id
    self.is_self = is_self


class UnknownEntityError(ValbotError):
  def __init__(self, kind: str, name: str):
    super().__init__(f"Unknown {kind}: {name}")
    self.kind = kind
    self.name = name


class InvalidRoutingError(ValbotError):
  def __init__(self, kind: str, value: str, allowed):
    super().__init__(f"{kind} must be one of: {', '.join(allowed)}")
    self.kind = kind
    self.value = value


class UpstreamError(ValbotError):
  pass


class RateLimitExhausted(UpstreamError):
  def __init__(self, url: str):
    super().__init__("Riot API rate limit hit, try again in a moment.")
    self.url = url


class UpstreamHTTPError(UpstreamError):
  def __init__(self, status: int, body: Optional[str] = None, service: str = "Riot"):
    excerpt = f": {body}" if body else ""
    super().__init__(f"{service} {status}{excerpt}")
    self.status = status
    self.body = body
    self.service = service


class UpstreamNetworkError(UpstreamError):
  def __init__(self, detail: str, service: str = "Riot"):
    super().__init__(f"{service} unreachable: {detail}")
    self.detail = detail
    self.service = service
