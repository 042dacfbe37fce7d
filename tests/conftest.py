"""Shared fixtures: settings, identities and a MockTransport-backed Riot API."""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest

from tftboard.config import Settings
from tftboard.models import PlayerIdentity
from tftboard.services.store import ProfileStore
from tftboard.util.ai_cache import ai_cache_clear

Route = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


class FakeUpstream:
  """Routes requests by URL path; records every request it sees."""

  def __init__(self, routes: Dict[str, Route]):
    self.routes = routes
    self.calls: List[httpx.Request] = []

  def __call__(self, request: httpx.Request) -> httpx.Response:
    self.calls.append(request)
    route = self.routes.get(request.url.path)
    if route is None:
      return httpx.Response(404, json={"status": {"message": "Data not found", "status_code": 404}})
    if callable(route):
      return route(request)
    status, body = route
    return httpx.Response(status, json=body)

  def paths(self) -> List[str]:
    return [r.url.path for r in self.calls]

  def client(self) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(self))


def connect_error(request: httpx.Request) -> httpx.Response:
  raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture(autouse=True)
def _clear_ai_cache():
  ai_cache_clear()
  yield
  ai_cache_clear()


@pytest.fixture
def settings():
  return Settings(riot_api_key="test-riot-key", gemini_api_key="test-gemini-key", use_proxy=False)


@pytest.fixture
def store():
  return ProfileStore()


@pytest.fixture
def halcyon():
  return PlayerIdentity(region="VN2", game_name="Halcyon", tag_line="1621", display_name="Halcyon#1621")


ACCOUNT = "/riot/account/v1/accounts/by-riot-id/{name}/{tag}"
SUMMONER = "/tft/summoner/v1/summoners/by-puuid/{puuid}"
LEAGUE = "/tft/league/v1/entries/by-summoner/{sid}"
MATCH_IDS = "/tft/match/v1/matches/by-puuid/{puuid}/ids"
MATCH = "/tft/match/v1/matches/{mid}"


def tft_match(match_id: str, puuid: str, placement: int, **extra) -> dict:
  """Minimal tft-match-v1 payload with the player plus one opponent."""
  return {
    "metadata": {"match_id": match_id, "participants": [puuid, "other"]},
    "info": {
      "game_datetime": 1730000000000,
      "game_length": 2100.5,
      "participants": [
        {"puuid": "other", "placement": 1 if placement != 1 else 2},
        {
          "puuid": puuid,
          "placement": placement,
          "level": 8,
          "last_round": 33,
          "traits": [{"name": "TFT16_Brawler", "num_units": 4}],
          "units": [{"character_id": "TFT16_Illaoi", "tier": 2}],
          "augments": ["TFT_Augment_Example"],
          **extra,
        },
      ],
    },
  }


def halcyon_routes(overrides: Optional[Dict[str, Route]] = None) -> Dict[str, Route]:
  """account p1 / summoner s1 / GOLD II 40 / matches m1, m2."""
  routes: Dict[str, Route] = {
    ACCOUNT.format(name="Halcyon", tag="1621"): (200, {"puuid": "p1", "gameName": "Halcyon", "tagLine": "1621"}),
    SUMMONER.format(puuid="p1"): (200, {"id": "s1", "puuid": "p1", "summonerLevel": 50, "profileIconId": 7}),
    LEAGUE.format(sid="s1"): (200, [{"tier": "GOLD", "rank": "II", "leaguePoints": 40, "wins": 10, "losses": 8}]),
    MATCH_IDS.format(puuid="p1"): (200, ["m1", "m2"]),
    MATCH.format(mid="m1"): (200, tft_match("m1", "p1", 3)),
    MATCH.format(mid="m2"): connect_error,
  }
  routes.update(overrides or {})
  return routes
