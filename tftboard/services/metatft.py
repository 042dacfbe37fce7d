from urllib.parse import quote

import httpx

from tftboard.config import METATFT_BASE_URL, TFT_SET, Settings
from tftboard.errors import TFTBoardError
from tftboard.fetcher import fetch_json
from tftboard.models import FetchResult, PlayerIdentity
from tftboard.services.normalize import normalize_metatft
from tftboard.services.store import ProfileStore
from tftboard.util.log import get_logger

log = get_logger("tftboard.metatft", "META")


def lookup_url(ign: PlayerIdentity, base: str = METATFT_BASE_URL) -> str:
  name = quote(ign.decoded_game_name, safe="")
  tag = quote(ign.tag_line, safe="")
  return f"{base}/lookup_by_riotid/{ign.region}/{name}/{tag}"


async def fetch_metatft_profile(
    ign: PlayerIdentity,
    client: httpx.AsyncClient,
    store: ProfileStore,
    settings: Settings,
    *,
    tft_set: str = TFT_SET,
) -> FetchResult:
  params = {"source": "full_profile", "tft_set": tft_set}
  try:
    raw = await fetch_json(client, lookup_url(ign), params=params, retries=settings.max_retries)
    profile = normalize_metatft(raw, riot_id=ign.display_name)
  except TFTBoardError as e:
    log.error("MetaTFT profile for %s failed: %s", ign.display_name, e)
    return FetchResult.fail(ign, str(e), "metatft")
  except Exception as e:
    log.exception("MetaTFT profile for %s failed unexpectedly", ign.display_name)
    return FetchResult.fail(ign, str(e) or e.__class__.__name__, "metatft")

  store.put(ign.display_name, profile)
  return FetchResult.ok(ign, profile, "metatft")
