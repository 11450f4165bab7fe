import pytest

from tests.factories import AGENTS_PAYLOAD, JETT, MAPS_PAYLOAD, PUUID, SOVA, make_match
from valbot.errors import UnknownEntityError
from valbot.models import KD_INFINITE
from valbot.services import handlers
from valbot.services.stats_agg import (
  aggregate_breakdown,
  aggregate_recent_stats,
  kd_ratio,
  resolve_agent_filter,
  resolve_map_filter,
)

AGENTS = {a["displayName"].lower(): a for a in AGENTS_PAYLOAD["data"]}
MAPS = {"ascent": MAPS_PAYLOAD["data"][0], "duality": MAPS_PAYLOAD["data"][1]}


def test_mode_filter_counts_only_matching_games():
  matches = [make_match("a", mode="competitive"), make_match("b", mode="unrated")]
  s = aggregate_recent_stats(PUUID, matches, "competitive")
  assert s.games == 1
  assert s.kills == 10


def test_no_filter_counts_every_game_with_player_entry():
  matches = [
    make_match("a", mode="competitive"),
    make_match("b", mode="unrated", won=False),
    make_match("c", puuid="stranger"),
  ]
  s = aggregate_recent_stats(PUUID, matches, None)
  assert s.games == 2
  assert s.wins == 1
  assert s.winrate == 0.5


def test_totals_and_tallies():
  matches = [
    make_match("a", kills=20, deaths=10, assists=5, agent=JETT),
    make_match("b", kills=5, deaths=10, assists=1, agent=SOVA, map_id="/Game/Maps/Duality/Duality"),
    make_match("c", kills=7, deaths=0, assists=2, agent=JETT),
  ]
  s = aggregate_recent_stats(PUUID, matches)
  assert (s.kills, s.deaths, s.assists) == (32, 20, 8)
  assert s.kd == 1.6
  assert s.perAgent == {JETT: 2, SOVA: 1}
  assert s.perMap == {"ascent": 2, "duality": 1}


def test_zero_deaths_reports_infinite_kd():
  s = aggregate_recent_stats(PUUID, [make_match("a", kills=12, deaths=0)])
  assert s.kd == KD_INFINITE
  assert kd_ratio(0, 0) == KD_INFINITE
  assert kd_ratio(7, 3) == 2.33


def test_record_without_stats_is_skipped():
  m = make_match("a")
  del m["players"][0]["stats"]
  s = aggregate_recent_stats(PUUID, [m])
  assert s.games == 0
  assert s.winrate is None


def test_unresolved_win_flag_counts_game_but_not_win_rate():
  matches = [make_match("a", won=True), make_match("b", won=None)]
  s = aggregate_recent_stats(PUUID, matches)
  assert s.games == 2
  assert s.wins == 1
  assert s.undecided == 1
  assert s.winrate == 1.0


def test_agent_breakdown_sorted_by_games():
  matches = [
    make_match("a", agent=SOVA, won=False),
    make_match("b", agent=JETT),
    make_match("c", agent=JETT, kills=4, deaths=2),
  ]
  rows = aggregate_breakdown(PUUID, matches, "agent")
  assert [r.key for r in rows] == [JETT, SOVA]
  jett = rows[0]
  assert (jett.games, jett.wins, jett.kills, jett.deaths) == (2, 2, 14, 7)
  assert jett.kd == 2.0
  assert rows[1].winrate == 0.0


def test_breakdown_only_and_mode_filter():
  matches = [
    make_match("a", map_id="/Game/Maps/Duality/Duality"),
    make_match("b", mode="unrated"),
    make_match("c"),
  ]
  rows = aggregate_breakdown(PUUID, matches, "map", "competitive", only="ascent")
  assert len(rows) == 1
  assert rows[0].key == "ascent"
  assert rows[0].games == 1


def test_resolve_filters_case_insensitive():
  uuid, meta = resolve_agent_filter(AGENTS, "jETT")
  assert uuid == JETT
  assert meta["displayName"] == "Jett"
  tail, meta = resolve_map_filter(MAPS, "bind")
  assert tail == "duality"


def test_resolve_filter_unknown_name():
  with pytest.raises(UnknownEntityError) as ei:
    resolve_agent_filter(AGENTS, "Gandalf")
  assert ei.value.kind == "agent"
  with pytest.raises(UnknownEntityError):
    resolve_map_filter(MAPS, "Dust2")


def test_escalation_games_are_filtered_by_queue_id():
  matches = [make_match("e1", mode="ggteam"), make_match("c1", mode="competitive")]
  s = aggregate_recent_stats(PUUID, matches, handlers.mode_filter("escalation"))
  assert s.games == 1
