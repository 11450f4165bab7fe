# valbot/models.py
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union

KD_INFINITE = "∞"


class Link(BaseModel):
  gameName: Optional[str] = None
  tagLine: Optional[str] = None
  shard: Optional[str] = None
  region: Optional[str] = None
  lastLinkedAt: Optional[int] = None  # epoch ms

  @property
  def has_riot_id(self) -> bool:
    return bool(self.gameName and self.tagLine)


class Account(BaseModel):
  gameName: str
  tagLine: str
  puuid: str

  @property
  def riot_id(self) -> str:
    return f"{self.gameName}#{self.tagLine}"


class Routing(BaseModel):
  region: str
  shard: str


class Summary(BaseModel):
  kills: int = 0
  deaths: int = 0
  assists: int = 0
  wins: int = 0
  games: int = 0
  undecided: int = 0  # games whose win flag could not be resolved
  kd: Union[float, str] = KD_INFINITE
  winrate: Optional[float] = None  # 0..1 over decided games
  perAgent: Dict[str, int] = Field(default_factory=dict)
  perMap: Dict[str, int] = Field(default_factory=dict)


class BreakdownRow(BaseModel):
  key: str
  games: int = 0
  wins: int = 0
  undecided: int = 0
  kills: int = 0
  deaths: int = 0
  assists: int = 0
  kd: Union[float, str] = KD_INFINITE
  winrate: Optional[float] = None


# ---- platform-neutral replies ----
class EmbedField(BaseModel):
  name: str
  value: str
  inline: bool = False


class EmbedSpec(BaseModel):
  title: str
  description: Optional[str] = None
  fields: List[EmbedField] = []
  thumbnail: Optional[str] = None
  image: Optional[str] = None
  footer: Optional[str] = None
  timestamp: bool = True


class LinkButton(BaseModel):
  label: str
  url: str


class Reply(BaseModel):
  content: Optional[str] = None
  embed: Optional[EmbedSpec] = None
  buttons: List[LinkButton] = []
  ephemeral: bool = False


# ---- HTTP API responses ----
class ProfileResponse(BaseModel):
  riotId: str
  puuid: str
  region: str
  shard: str
  queue: Optional[str] = None
  summary: Summary


class BreakdownResponse(BaseModel):
  riotId: str
  puuid: str
  region: str
  shard: str
  by: str
  queue: Optional[str] = None
  rows: List[BreakdownRow] = []
