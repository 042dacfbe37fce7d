# tftboard/services/riot_profile.py
import asyncio
from typing import List, Optional

from tftboard.config import MATCH_DETAIL_COUNT, MATCH_ID_COUNT
from tftboard.errors import TFTBoardError
from tftboard.models import FetchResult, PlayerIdentity, RankedEntry, Summoner, TFTMatch
from tftboard.riot_client import RiotClient
from tftboard.services.normalize import normalize_riot, pick_tft_entry
from tftboard.services.store import ProfileStore
from tftboard.util.log import get_logger

log = get_logger("tftboard.riot_profile", "RIOT")


async def _ranked(rc: RiotClient, ign: PlayerIdentity, summoner: Summoner) -> Optional[RankedEntry]:
  # league-v1 by-summoner needs the encrypted summoner id, which some platforms omit
  if not summoner.id:
    log.warning("Summoner id not available for %s; league data unavailable", ign.display_name)
    return None
  try:
    entries = await rc.league_entries(ign.region, summoner.id)
  except TFTBoardError as e:
    log.warning("Could not fetch ranked info for %s: %s", ign.display_name, e)
    return None
  return pick_tft_entry(entries)


async def _match_ids(rc: RiotClient, ign: PlayerIdentity, puuid: str) -> List[str]:
  try:
    return await rc.match_ids(ign.region, puuid, MATCH_ID_COUNT)
  except TFTBoardError as e:
    log.warning("Could not fetch match history for %s: %s", ign.display_name, e)
    return []


async def _detail(rc: RiotClient, ign: PlayerIdentity, match_id: str) -> Optional[TFTMatch]:
  try:
    return await rc.match(ign.region, match_id)
  except TFTBoardError as e:
    log.warning("Match %s unavailable for %s: %s", match_id, ign.display_name, e)
    return None


async def fetch_riot_profile(ign: PlayerIdentity, rc: RiotClient, store: ProfileStore) -> FetchResult:
  """
  account -> summoner -> (league || match ids) -> first N match details.
  Account and summoner failures fail the whole result; the rest degrade to
  unranked / empty / placement-less entries. Never raises.
  """
  try:
    account = await rc.account_by_riot_id(ign.region, ign.decoded_game_name, ign.tag_line)
    summoner = await rc.summoner_by_puuid(ign.region, account.puuid)

    entry, match_ids = await asyncio.gather(
        _ranked(rc, ign, summoner),
        _match_ids(rc, ign, account.puuid),
    )
    details = await asyncio.gather(*[_detail(rc, ign, mid) for mid in match_ids[:MATCH_DETAIL_COUNT]])

    profile = normalize_riot(account, summoner, entry, match_ids, list(details))
  except TFTBoardError as e:
    log.error("Riot profile for %s failed: %s", ign.display_name, e)
    return FetchResult.fail(ign, str(e), "riot")
  except Exception as e:
    log.exception("Riot profile for %s failed unexpectedly", ign.display_name)
    return FetchResult.fail(ign, str(e) or e.__class__.__name__, "riot")

  store.put(ign.display_name, profile)
  return FetchResult.ok(ign, profile, "riot")
