import pytest
from fastapi.testclient import TestClient

from tests.factories import ACCOUNT_HOST, MATCH_HOST, PUUID, make_match, matchlist
from valbot.main import app
from valbot.routes.stats import get_ctx

ACCOUNT_PATH = "/riot/account/v1/accounts/by-riot-id/Nick/TAG"


@pytest.fixture()
def client(ctx):
  app.dependency_overrides[get_ctx] = lambda: ctx
  # no `with`: skip the lifespan, the context is injected above
  yield TestClient(app)
  app.dependency_overrides.clear()


def test_health(client):
  r = client.get("/api/health")
  assert r.status_code == 200
  assert r.text == "ok"


def test_profile_bad_riot_id_is_400(client, upstream):
  r = client.get("/api/profile", params={"riotId": "NoSeparator"})
  assert r.status_code == 400
  assert upstream.calls == []


def test_profile_returns_summary(client, upstream):
  upstream.json(ACCOUNT_HOST, ACCOUNT_PATH, {"puuid": PUUID, "gameName": "Nick", "tagLine": "TAG"})
  upstream.json(MATCH_HOST, f"/val/match/v1/matchlists/by-puuid/{PUUID}", matchlist("m1", "m2"))
  upstream.json(MATCH_HOST, "/val/match/v1/matches/m1", make_match("m1", deaths=0))
  upstream.json(MATCH_HOST, "/val/match/v1/matches/m2", make_match("m2", mode="unrated"))
  r = client.get("/api/profile", params={"riotId": "Nick#TAG", "queue": "competitive"})
  assert r.status_code == 200
  body = r.json()
  assert body["riotId"] == "Nick#TAG"
  assert body["queue"] == "competitive"
  assert body["summary"]["games"] == 1
  assert body["summary"]["kd"] == "∞"


def test_unknown_account_is_404(client, upstream):
  r = client.get("/api/profile", params={"riotId": "Ghost#000"})
  assert r.status_code == 404


def test_map_stats_unknown_map_is_404(client, upstream):
  r = client.get("/api/map-stats", params={"riotId": "Nick#TAG", "map": "Dust2"})
  assert r.status_code == 404
  assert "Unknown map" in r.json()["detail"]
