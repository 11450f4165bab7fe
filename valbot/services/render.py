# valbot/services/render.py
from datetime import datetime, timezone
from typing import Dict, List, Optional
from urllib.parse import quote

from valbot.assets_client import agent_by_uuid, map_tail
from valbot.config import MODE_NAMES
from valbot.models import (
  Account,
  BreakdownRow,
  EmbedField,
  EmbedSpec,
  LinkButton,
  Routing,
  Summary,
)
from valbot.services.stats_agg import find_player, match_mode, team_won

FOOTER = "Source: Riot Games API • Icons: valorant-api.com"
RECENT_LINES = 5
TOP_ROWS = 5


def tracker_url(game_name: str, tag_line: str) -> str:
  rid = f"{quote(game_name, safe='')}%23{quote(tag_line, safe='')}"
  return f"https://tracker.gg/valorant/profile/riot/{rid}/overview"

def tracker_button(account: Account, label: str = "Tracker.gg profile") -> LinkButton:
  return LinkButton(label=label, url=tracker_url(account.gameName, account.tagLine))

def format_duration(ms: Optional[int]) -> str:
  if not ms:
    return "—"
  s = int(ms) // 1000
  return f"{s // 60}m {s % 60}s"

def mode_name(raw: Optional[str]) -> str:
  if not raw:
    return "—"
  return MODE_NAMES.get(raw, raw)

def _pct(x: Optional[float]) -> str:
  return "—" if x is None else f"{x * 100:.0f}%"

def _date(ms: Optional[int], fmt: str = "%Y-%m-%d") -> str:
  return datetime.fromtimestamp((ms or 0) / 1000, tz=timezone.utc).strftime(fmt)

def _result(won: Optional[bool]) -> str:
  if won is None:
    return "—"
  return "WIN" if won else "LOSS"

def _map_name(maps: Dict[str, dict], map_id: Optional[str]) -> str:
  tail = map_tail(map_id)
  return (maps.get(tail) or {}).get("displayName") or tail


def match_line(m: dict, puuid: str, agents: Dict[str, dict], maps: Dict[str, dict]) -> str:
  info = m.get("matchInfo") or {}
  you = find_player(m, puuid) or {}
  stats = you.get("stats") or {}
  agent = agent_by_uuid(agents, you.get("characterId")) or {}
  parts = [
    _date(info.get("gameStartMillis")),
    mode_name(match_mode(m)),
    _map_name(maps, info.get("mapId")),
    agent.get("displayName") or "—",
    _result(team_won(m, you.get("teamId"))),
    f"{stats.get('kills', 0)}/{stats.get('deaths', 0)}/{stats.get('assists', 0)}",
    format_duration(info.get("gameLengthMillis")),
  ]
  return "• " + " • ".join(parts)


def profile_embed(
    account: Account,
    summary: Summary,
    matches: List[dict],
    routing: Routing,
    agents: Dict[str, dict],
    maps: Dict[str, dict],
    target: Optional[str] = None,
    queue: Optional[str] = None,
) -> EmbedSpec:
  desc = f"Summary of {summary.games} games"
  if summary.games:
    desc += f" • wins: {summary.wins} • WR {_pct(summary.winrate)}"
  if queue:
    desc += f" • {mode_name(queue)}"
  if target:
    desc += f" for {target}"
  fields = [
    EmbedField(name="K/D/A", value=f"{summary.kills}/{summary.deaths}/{summary.assists} (K/D {summary.kd})", inline=True),
    EmbedField(name="Shard", value=routing.shard, inline=True),
  ]
  if summary.perAgent:
    top_uuid, top_games = max(summary.perAgent.items(), key=lambda kv: kv[1])
    top = agent_by_uuid(agents, top_uuid) or {}
    fields.append(EmbedField(name="Most played", value=f"{top.get('displayName') or '—'} ({top_games})", inline=True))
  lines = [match_line(m, account.puuid, agents, maps) for m in matches[:RECENT_LINES]]
  if lines:
    fields.append(EmbedField(name="Recent matches", value="\n".join(lines)))
  return EmbedSpec(title=f"Valorant — {account.riot_id}", description=desc, fields=fields, footer=FOOTER)


def last_match_embed(account: Account, match: dict, agents: Dict[str, dict], maps: Dict[str, dict]) -> EmbedSpec:
  info = match.get("matchInfo") or {}
  tail = map_tail(info.get("mapId"))
  map_meta = maps.get(tail) or {}
  spec = EmbedSpec(
      title=f"Last match — {account.riot_id}",
      fields=[
        EmbedField(name="Mode", value=mode_name(match_mode(match)), inline=True),
        EmbedField(name="Map", value=map_meta.get("displayName") or tail, inline=True),
        EmbedField(name="Duration", value=format_duration(info.get("gameLengthMillis")), inline=True),
      ],
      image=map_meta.get("splash"),
      footer=FOOTER,
  )
  me = find_player(match, account.puuid)
  if me:
    stats = me.get("stats") or {}
    agent = agent_by_uuid(agents, me.get("characterId")) or {}
    spec.description = f"{_date(info.get('gameStartMillis'), '%Y-%m-%d %H:%M UTC')} • {_result(team_won(match, me.get('teamId')))}"
    spec.fields.append(EmbedField(name="Agent", value=agent.get("displayName") or "—", inline=True))
    spec.fields.append(EmbedField(
        name="K/D/A",
        value=f"{stats.get('kills', 0)}/{stats.get('deaths', 0)}/{stats.get('assists', 0)}",
        inline=True,
    ))
    spec.thumbnail = agent.get("displayIcon")
  return spec


def breakdown_embed(
    account: Account,
    rows: List[BreakdownRow],
    by: str,
    roster: Dict[str, dict],
    selected: Optional[str] = None,
) -> EmbedSpec:
  def meta(row: BreakdownRow) -> dict:
    if by == "agent":
      return agent_by_uuid(roster, row.key) or {}
    return roster.get(row.key) or {}

  lines = []
  for row in rows[:TOP_ROWS]:
    name = meta(row).get("displayName") or (row.key if by == "map" else "—")
    lines.append(f"• {name}: {row.games} games • wins {row.wins} • WR {_pct(row.winrate)} • K/D {row.kd}")

  if by == "agent":
    title, heading = "Agent stats", (f"Agent: {selected}" if selected else "Top agents")
  else:
    title, heading = "Map stats", (f"Map: {selected}" if selected else "Top maps")
  spec = EmbedSpec(
      title=f"{title} — {account.riot_id}",
      description=heading,
      fields=[EmbedField(name="Breakdown", value="\n".join(lines))],
  )
  if rows:
    top = meta(rows[0])
    if by == "agent":
      spec.thumbnail = top.get("displayIcon")
    else:
      spec.image = top.get("splash")
  return spec
