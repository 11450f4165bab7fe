# valbot/services/stats_agg.py
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple, Union

from valbot.assets_client import map_tail
from valbot.errors import UnknownEntityError
from valbot.models import KD_INFINITE, BreakdownRow, Summary

# ----------------------------
# Helpers
# ----------------------------
def kd_ratio(kills: int, deaths: int) -> Union[float, str]:
  return round(kills / deaths, 2) if deaths > 0 else KD_INFINITE

def win_rate(wins: int, decided: int) -> Optional[float]:
  return wins / decided if decided > 0 else None

def match_mode(m: dict) -> str:
  info = m.get("matchInfo") or {}
  return (info.get("queueId") or info.get("gameMode") or "unknown").lower()

def find_player(m: dict, puuid: str) -> Optional[dict]:
  return next((p for p in m.get("players") or [] if p.get("puuid") == puuid), None)

def team_won(m: dict, team_id) -> Optional[bool]:
  """Win flag of the given team, None when the record does not say."""
  if team_id is None:
    return None
  team = next((t for t in m.get("teams") or [] if t.get("teamId") == team_id), None)
  if not team or team.get("won") is None:
    return None
  return bool(team["won"])

def _player_rows(puuid: str, matches: Iterable[dict], mode_filter: Optional[str]):
  """(match, player, won) for every record that counts toward totals."""
  want = mode_filter.lower() if mode_filter else None
  for m in matches:
    if want and match_mode(m) != want:
      continue
    you = find_player(m, puuid)
    if not you or not you.get("stats"):
      continue
    yield m, you, team_won(m, you.get("teamId"))

# ----------------------------
# Recent summary
# ----------------------------
def aggregate_recent_stats(puuid: str, matches: List[dict], mode_filter: Optional[str] = None) -> Summary:
  total = {"k": 0, "d": 0, "a": 0, "wins": 0, "games": 0, "undecided": 0}
  per_agent: Dict[str, int] = defaultdict(int)
  per_map: Dict[str, int] = defaultdict(int)

  for m, you, won in _player_rows(puuid, matches, mode_filter):
    stats = you["stats"]
    total["games"] += 1
    if won is None:
      total["undecided"] += 1
    elif won:
      total["wins"] += 1
    total["k"] += stats.get("kills") or 0
    total["d"] += stats.get("deaths") or 0
    total["a"] += stats.get("assists") or 0
    per_agent[(you.get("characterId") or "unknown").lower()] += 1
    per_map[map_tail((m.get("matchInfo") or {}).get("mapId"))] += 1

  return Summary(
      kills=total["k"],
      deaths=total["d"],
      assists=total["a"],
      wins=total["wins"],
      games=total["games"],
      undecided=total["undecided"],
      kd=kd_ratio(total["k"], total["d"]),
      winrate=win_rate(total["wins"], total["games"] - total["undecided"]),
      perAgent=dict(per_agent),
      perMap=dict(per_map),
  )

# ----------------------------
# Per-agent / per-map breakdown
# ----------------------------
def _breakdown_key(by: str, m: dict, you: dict) -> str:
  if by == "agent":
    return (you.get("characterId") or "unknown").lower()
  if by == "map":
    return map_tail((m.get("matchInfo") or {}).get("mapId"))
  raise ValueError("by must be 'agent' or 'map'")

def aggregate_breakdown(
    puuid: str,
    matches: List[dict],
    by: str,
    mode_filter: Optional[str] = None,
    only: Optional[str] = None,
) -> List[BreakdownRow]:
  per = defaultdict(lambda: {"games": 0, "wins": 0, "undecided": 0, "k": 0, "d": 0, "a": 0})
  only = only.lower() if only else None

  for m, you, won in _player_rows(puuid, matches, mode_filter):
    key = _breakdown_key(by, m, you)
    if only and key != only:
      continue
    stats = you["stats"]
    r = per[key]
    r["games"] += 1
    if won is None:
      r["undecided"] += 1
    elif won:
      r["wins"] += 1
    r["k"] += stats.get("kills") or 0
    r["d"] += stats.get("deaths") or 0
    r["a"] += stats.get("assists") or 0

  rows = [
    BreakdownRow(
        key=key,
        games=r["games"],
        wins=r["wins"],
        undecided=r["undecided"],
        kills=r["k"],
        deaths=r["d"],
        assists=r["a"],
        kd=kd_ratio(r["k"], r["d"]),
        winrate=win_rate(r["wins"], r["games"] - r["undecided"]),
    )
    for key, r in per.items()
  ]
  rows.sort(key=lambda x: x.games, reverse=True)
  return rows

# ----------------------------
# Name filters against static rosters
# ----------------------------
def resolve_agent_filter(roster: Dict[str, dict], name: str) -> Tuple[str, dict]:
  """Display name -> (lower-cased agent uuid, roster entry)."""
  want = (name or "").strip().lower()
  for a in roster.values():
    if (a.get("displayName") or "").lower() == want:
      return (a.get("uuid") or "").lower(), a
  raise UnknownEntityError("agent", name)

def resolve_map_filter(roster: Dict[str, dict], name: str) -> Tuple[str, dict]:
  """Display name -> (map tail, roster entry)."""
  want = (name or "").strip().lower()
  for tail, m in roster.items():
    if (m.get("displayName") or "").lower() == want:
      return tail, m
  raise UnknownEntityError("map", name)
