import asyncio
import json
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import unquote

import httpx
from pydantic import ValidationError

from tftboard.config import ROSTER_FILE, Settings
from tftboard.errors import ConfigurationError
from tftboard.fetcher import new_client
from tftboard.models import FetchResult, PlayerIdentity
from tftboard.riot_client import RiotClient
from tftboard.services.metatft import fetch_metatft_profile
from tftboard.services.rating import sort_by_rating
from tftboard.services.riot_profile import fetch_riot_profile
from tftboard.services.store import ProfileStore
from tftboard.util.log import get_logger

log = get_logger("tftboard.profiles", "LOAD")


def load_roster(path: Optional[str] = None) -> List[PlayerIdentity]:
  """
  Roster file: a JSON list of
    {"region": "VN2", "game_name": "Halcyon", "tag_line": "1621", "display_name": "Halcyon#1621"}
  `display_name` defaults to "<decoded name>#<tag>".
  """
  p = Path(path or ROSTER_FILE)
  if not p.exists():
    log.warning("Roster file %s not found; roster is empty", p)
    return []
  try:
    entries = json.loads(p.read_text(encoding="utf-8"))
  except json.JSONDecodeError as e:
    raise ConfigurationError(f"Roster file {p} is not valid JSON: {e}")
  if not isinstance(entries, list):
    raise ConfigurationError(f"Roster file {p} must contain a JSON list")

  roster = []
  for e in entries:
    if isinstance(e, dict) and not e.get("display_name"):
      e = {**e, "display_name": f"{unquote(str(e.get('game_name', '')))}#{e.get('tag_line', '')}"}
    try:
      roster.append(PlayerIdentity.model_validate(e))
    except ValidationError as err:
      raise ConfigurationError(f"Invalid roster entry {e!r}: {err}")
  return roster


async def load_profiles(
    identities: Sequence[PlayerIdentity],
    settings: Settings,
    store: ProfileStore,
    client: Optional[httpx.AsyncClient] = None,
) -> List[FetchResult]:
  """
  Fetch every identity concurrently from the configured source and return
  the results sorted by rating. Individual failures come back as failed
  results; only a missing Riot key (checked before any call) raises.
  """
  if settings.is_riot_source and not settings.riot_api_key:
    raise ConfigurationError("Riot API key not configured. Set RIOT_API_KEY.")

  owned = client is None
  http = client or new_client(settings.http_timeout)
  try:
    if settings.is_riot_source:
      async with RiotClient(settings, http) as rc:
        results = await asyncio.gather(*[fetch_riot_profile(ign, rc, store) for ign in identities])
    else:
      results = await asyncio.gather(
          *[fetch_metatft_profile(ign, http, store, settings) for ign in identities]
      )
  finally:
    if owned:
      await http.aclose()

  failed = sum(1 for r in results if not r.success)
  log.info("Loaded %d profiles from %s (%d failed)", len(results), settings.data_source, failed)
  return sort_by_rating(results)
