"""
Tests for the dashboard HTTP surface: source selection, error mapping and the
stored-profile views.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch

from tftboard.errors import ConfigurationError, RateLimitError
from tftboard.main import app
from tftboard.models import FetchResult, MatchSummary, NormalizedRanking, Profile, SummonerInfo
from tftboard.services.store import ProfileStore


@pytest.fixture
def client():
  app.state.store = ProfileStore()
  yield TestClient(app)
  app.state.store = ProfileStore()


@pytest.fixture
def stored(halcyon):
  profile = Profile(
      summoner=SummonerInfo(riot_id="Halcyon#1621", puuid="p1"),
      ranked=NormalizedRanking(tier="GOLD", rank="II", rating_text="GOLD II", rating_numeric=1440, num_games=18),
      matches=[MatchSummary(match_id="m1", placement=2), MatchSummary(match_id="m2", placement=7), MatchSummary(match_id="m3")],
  )
  app.state.store.put(halcyon.display_name, profile)
  return profile


def test_health(client):
  r = client.get("/api/health")
  assert r.status_code == 200
  assert r.text == "ok"


class TestProfilesRoute:
  def test_bad_source(self, client):
    r = client.get("/api/profiles", params={"source": "opgg"})
    assert r.status_code == 400

  def test_riot_without_key_is_400(self, client, monkeypatch):
    monkeypatch.delenv("RIOT_API_KEY", raising=False)
    with patch("tftboard.routes.profiles.load_roster", return_value=[]):
      r = client.get("/api/profiles", params={"source": "riot"})
    assert r.status_code == 400
    assert "RIOT_API_KEY" in r.json()["detail"]

  def test_source_override_and_stats(self, client, halcyon, stored):
    loader = AsyncMock(return_value=[
      FetchResult.ok(halcyon, stored, "riot"),
      FetchResult.fail(halcyon.model_copy(update={"game_name": "Ghost"}), "Summoner not found.", "riot"),
    ])
    with patch("tftboard.routes.profiles.load_roster", return_value=[halcyon]), \
         patch("tftboard.routes.profiles.load_profiles", loader):
      r = client.get("/api/profiles", params={"source": "riot"})

    assert r.status_code == 200
    body = r.json()
    assert body["source"] == "riot"
    assert body["stats"] == {"total_profiles": 2, "avg_rating": 1440, "highest_rank": "GOLD II", "total_games": 18}
    assert [x["success"] for x in body["results"]] == [True, False]
    assert body["results"][1]["error"] == "Summoner not found."
    assert loader.await_args.args[1].data_source == "riot"

  def test_loader_error_mapped(self, client):
    loader = AsyncMock(side_effect=RateLimitError())
    with patch("tftboard.routes.profiles.load_roster", return_value=[]), \
         patch("tftboard.routes.profiles.load_profiles", loader):
      r = client.get("/api/profiles")
    assert r.status_code == 429

  def test_roster_read_off_the_event_loop(self, client):
    roster = AsyncMock(return_value=[])
    loader = AsyncMock(return_value=[])
    with patch("tftboard.routes.profiles.run_in_threadpool", roster), \
         patch("tftboard.routes.profiles.load_profiles", loader):
      r = client.get("/api/profiles")
    assert r.status_code == 200
    assert roster.await_args.args[0].__name__ == "load_roster"
    assert loader.await_args.args[0] == []


class TestStoredProfile:
  def test_unknown_is_404(self, client):
    assert client.get("/api/profiles/Nobody%230000").status_code == 404

  def test_profile(self, client, stored):
    r = client.get("/api/profiles/Halcyon%231621")
    assert r.status_code == 200
    assert r.json()["ranked"]["rating_text"] == "GOLD II"

  def test_match_history(self, client, stored):
    r = client.get("/api/profiles/Halcyon%231621/matches", params={"seed": 7})
    body = r.json()
    assert body["player"] == "Halcyon#1621"
    assert body["avgPlacement"] == 4.5
    assert body["top4Rate"] == 50.0
    assert len(body["lpEstimates"]) == 3
    assert 25 <= body["lpEstimates"][0] <= 39
    assert -34 <= body["lpEstimates"][1] <= -25
    assert body["lpEstimates"][2] is None
    assert client.get("/api/profiles/Halcyon%231621/matches", params={"seed": 7}).json()["lpEstimates"] == body["lpEstimates"]


class TestAnalysisRoute:
  def test_unknown_player(self, client):
    r = client.post("/api/analysis/Nobody%230000", json={})
    assert r.status_code == 404

  def test_missing_key(self, client, stored, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    r = client.post("/api/analysis/Halcyon%231621", json={"mode": "all"})
    assert r.status_code == 400

  def test_bad_mode_rejected(self, client, stored):
    r = client.post("/api/analysis/Halcyon%231621", json={"mode": "everything"})
    assert r.status_code == 422

  def test_success(self, client, stored, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    gen = AsyncMock(return_value="Stabilise your early game.")
    with patch("tftboard.services.analysis.generate", gen):
      r = client.post("/api/analysis/Halcyon%231621", json={"mode": "select", "selected": [0]})
    assert r.status_code == 200
    assert r.json()["count"] == 1
    assert r.json()["analysis"] == "Stabilise your early game."

  def test_models_without_key(self, client, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    assert client.get("/api/analysis/models").status_code == 400

  def test_models(self, client, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    with patch("tftboard.routes.analysis.list_models", AsyncMock(side_effect=ConfigurationError("nope"))):
      assert client.get("/api/analysis/models").status_code == 400
    with patch("tftboard.routes.analysis.list_models", AsyncMock(return_value=["gemini-2.0-flash"])):
      r = client.get("/api/analysis/models")
    assert r.json()["models"] == ["gemini-2.0-flash"]
