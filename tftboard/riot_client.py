# tftboard/riot_client.py
import httpx
from urllib.parse import quote
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from tftboard.config import PLATFORMS, REGIONALS, DEFAULT_REGIONAL, MATCH_ID_COUNT, Settings
from tftboard.errors import ConfigurationError, UpstreamError
from tftboard.fetcher import RELAY_HINT, fetch_json, new_client
from tftboard.models import Account, RankedEntry, Summoner, TFTMatch
from tftboard.util.log import get_logger

log = get_logger("tftboard.riot_client", "RIOT")

M = TypeVar("M", bound=BaseModel)


def platform_for(region: str) -> str:
  return PLATFORMS.get(region.upper(), region.lower())


def regional_for(region: str) -> str:
  return REGIONALS.get(region.upper(), DEFAULT_REGIONAL)


def _parse(model: Type[M], data: Any, what: str) -> M:
  if not isinstance(data, dict):
    raise UpstreamError(f"Unexpected {what} response shape: {type(data).__name__}")
  try:
    return model.model_validate(data)
  except ValidationError as e:
    log.error("Rejected %s payload: %s", what, e)
    raise UpstreamError(f"Unexpected {what} response shape")


class RiotClient:
  """
  TFT endpoints of the Riot API, either direct or routed through the local
  relay (settings.use_proxy). Use as an async context manager.
  """

  def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
    self.settings = settings
    self._client = client
    self._owns_client = client is None

  async def __aenter__(self):
    if self._client is None:
      limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)
      self._client = new_client(self.settings.http_timeout, limits=limits)
    return self

  async def __aexit__(self, *exc):
    if self._client and self._owns_client:
      await self._client.aclose()

  def build_url(self, region: str, endpoint: str, regional: bool = False) -> str:
    route = regional_for(region) if regional else platform_for(region)
    if self.settings.use_proxy:
      return f"{self.settings.proxy_base_url}/{route}{endpoint}"
    return f"https://{route}.api.riotgames.com{endpoint}"

  def _headers(self) -> dict:
    if not self.settings.riot_api_key:
      raise ConfigurationError("Riot API key not configured. Set RIOT_API_KEY.")
    return {"X-Riot-Token": self.settings.riot_api_key, "Accept": "application/json"}

  async def _get(self, url: str, *, params: Optional[dict] = None) -> Any:
    headers = self._headers()
    if self._client is None:
      raise RuntimeError("RiotClient used outside of 'async with'")
    log.debug("GET %s", url)
    return await fetch_json(
        self._client,
        url,
        headers=headers,
        params=params,
        retries=self.settings.max_retries,
        hint=RELAY_HINT if self.settings.use_proxy else None,
    )

  # -------- Account via REGIONAL --------
  async def account_by_riot_id(self, region: str, game_name: str, tag_line: str) -> Account:
    endpoint = f"/riot/account/v1/accounts/by-riot-id/{quote(game_name, safe='')}/{quote(tag_line, safe='')}"
    data = await self._get(self.build_url(region, endpoint, regional=True))
    return _parse(Account, data, "account")

  # -------- Summoner & League (platform-scoped) --------
  async def summoner_by_puuid(self, region: str, puuid: str) -> Summoner:
    endpoint = f"/tft/summoner/v1/summoners/by-puuid/{puuid}"
    data = await self._get(self.build_url(region, endpoint))
    return _parse(Summoner, data, "summoner")

  async def league_entries(self, region: str, summoner_id: str) -> list[RankedEntry]:
    endpoint = f"/tft/league/v1/entries/by-summoner/{summoner_id}"
    data = await self._get(self.build_url(region, endpoint))
    return self._entries(data)

  async def league_entries_by_puuid(self, region: str, puuid: str) -> list[RankedEntry]:
    endpoint = f"/tft/league/v1/entries/by-puuid/{puuid}"
    data = await self._get(self.build_url(region, endpoint))
    return self._entries(data)

  @staticmethod
  def _entries(data: Any) -> list[RankedEntry]:
    if not isinstance(data, list):
      raise UpstreamError(f"Expected a list of league entries, got {type(data).__name__}")
    return [_parse(RankedEntry, e, "league entry") for e in data]

  # -------- Matches via REGIONAL --------
  async def match_ids(self, region: str, puuid: str, count: int = MATCH_ID_COUNT) -> list[str]:
    endpoint = f"/tft/match/v1/matches/by-puuid/{puuid}/ids"
    data = await self._get(self.build_url(region, endpoint, regional=True), params={"count": count})
    if not isinstance(data, list):
      raise UpstreamError(f"Expected a list of match ids, got {type(data).__name__}")
    return [str(mid) for mid in data]

  async def match(self, region: str, match_id: str) -> TFTMatch:
    endpoint = f"/tft/match/v1/matches/{match_id}"
    data = await self._get(self.build_url(region, endpoint, regional=True))
    return _parse(TFTMatch, data, "match")
