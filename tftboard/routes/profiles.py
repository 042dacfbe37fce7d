# tftboard/routes/profiles.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from tftboard.config import DATA_SOURCES, load_settings
from tftboard.errors import TFTBoardError
from tftboard.models import Profile, ProfilesResponse
from tftboard.routes.common import get_store, to_http
from tftboard.services.profiles import load_profiles, load_roster
from tftboard.services.rating import average_placement, calculate_stats, estimate_lp_changes, top4_rate
from tftboard.services.store import ProfileStore

router = APIRouter(prefix="/api", tags=["profiles"])


@router.get("/profiles", response_model=ProfilesResponse)
async def get_profiles(source: Optional[str] = None, store: ProfileStore = Depends(get_store)):
  """
  Example:
    /api/profiles?source=riot
  Refreshes every roster entry; failed entries are returned with their error.
  """
  settings = load_settings()
  if source:
    if source not in DATA_SOURCES:
      raise HTTPException(400, f"source must be one of: {', '.join(DATA_SOURCES)}")
    settings = settings.model_copy(update={"data_source": source})

  try:
    roster = await run_in_threadpool(load_roster)
    results = await load_profiles(roster, settings, store)
  except TFTBoardError as e:
    raise to_http(e)
  return ProfilesResponse(source=settings.data_source, stats=calculate_stats(results), results=results)


def _stored(display_name: str, store: ProfileStore) -> Profile:
  profile = store.get(display_name)
  if profile is None:
    raise HTTPException(404, f"No data for {display_name}. Refresh profiles first.")
  return profile


@router.get("/profiles/{display_name}", response_model=Profile)
async def get_profile(display_name: str, store: ProfileStore = Depends(get_store)):
  return _stored(display_name, store)


@router.get("/profiles/{display_name}/matches")
async def get_match_history(display_name: str, seed: int = 0, store: ProfileStore = Depends(get_store)):
  profile = _stored(display_name, store)
  matches = profile.matches
  return {
    "player": profile.summoner.riot_id or display_name,
    "ranked": profile.ranked,
    "avgPlacement": average_placement(matches),
    "top4Rate": top4_rate(matches),
    # cosmetic, seeded; not rank history
    "lpEstimates": estimate_lp_changes(matches, seed),
    "ratingChanges": profile.ranked_rating_changes,
    "matches": matches,
  }
