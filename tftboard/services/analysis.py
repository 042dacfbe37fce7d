import json
from typing import List, Optional, Sequence

import httpx

from tftboard.config import Settings
from tftboard.errors import ConfigurationError, NotFoundError
from tftboard.gemini_client import generate
from tftboard.models import MatchSummary, Profile
from tftboard.services.store import ProfileStore

MAX_ANALYZED = 20


def select_matches(matches: Sequence[MatchSummary], mode: str = "all", selected: Optional[Sequence[int]] = None) -> List[MatchSummary]:
  if mode == "top10":
    picked = list(matches[:10])
  elif mode == "select":
    picked = [matches[i] for i in (selected or []) if 0 <= i < len(matches)]
  else:
    picked = list(matches[:MAX_ANALYZED])
  # a match without placement has no detail worth analysing
  return [m for m in picked if m.placement is not None]


def match_stats(matches: Sequence[MatchSummary]) -> dict:
  placed = [m.placement for m in matches if m.placement is not None]
  n = len(placed)
  return {
    "count": n,
    "top4": sum(1 for p in placed if p <= 4),
    "wins": sum(1 for p in placed if p == 1),
    "avg": round(sum(placed) / n, 2) if n else 0.0,
  }


def _unit_name(u) -> str:
  if isinstance(u, dict):
    return str(u.get("character_id") or u.get("name") or "").split("_", 1)[-1]
  return str(u)


def _trait_name(t) -> str:
  if isinstance(t, dict):
    return str(t.get("name") or "").split("_", 1)[-1]
  parts = str(t).split("_")  # "TFT16_Brawler_3"
  return parts[1] if len(parts) > 1 else parts[0]


def _compact_match(i: int, m: MatchSummary) -> dict:
  return {
    "game": i + 1,
    "placement": m.placement,
    "level": m.level,
    "round": m.last_round,
    "units": [_unit_name(u) for u in m.units],
    "traits": [_trait_name(t) for t in m.traits],
    "augments": [str(a) for a in m.augments],
  }


def build_prompt(profile: Profile, matches: Sequence[MatchSummary], display_name: str) -> str:
  s = match_stats(matches)
  top4_pct = (100.0 * s["top4"] / s["count"]) if s["count"] else 0.0
  name = profile.summoner.riot_id or display_name
  data = [_compact_match(i, m) for i, m in enumerate(matches)]
  return (
    "You are a Challenger-level TFT coach. Analyse the games below using only the data given.\n\n"
    f"PLAYER: {name} ({profile.ranked.rating_text}) - {profile.ranked.num_games} ranked games\n"
    f"STATS ({s['count']} games): Top4 {top4_pct:.1f}%, Avg placement {s['avg']}, Wins {s['wins']}\n\n"
    f"MATCHES:\n{json.dumps(data, ensure_ascii=False, indent=2)}\n\n"
    "Answer with these sections:\n"
    "## OVERVIEW\n## OPENERS\n## CORE & UPGRADES\n## FINAL BOARDS\n"
    "## BOTTOM-4 GAMES\n## MISTAKES\n## STRENGTHS\n## TAKEAWAYS\n"
  )


async def analyze_player(
    display_name: str,
    store: ProfileStore,
    settings: Settings,
    *,
    mode: str = "all",
    selected: Optional[Sequence[int]] = None,
    model: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> dict:
  profile = store.get(display_name)
  if profile is None:
    raise NotFoundError(f"No data for {display_name}. Refresh profiles first.")
  if not settings.gemini_api_key:
    raise ConfigurationError("No Gemini API key configured. Set GEMINI_API_KEY.")

  matches = select_matches(profile.matches, mode, selected)
  if not matches:
    raise NotFoundError(f"No analysable matches for {display_name}.")

  use_model = model or settings.gemini_model
  text = await generate(build_prompt(profile, matches, display_name), use_model, settings.gemini_api_key, client=client)
  return {
    "player": profile.summoner.riot_id or display_name,
    "rank": profile.ranked.rating_text,
    "count": len(matches),
    "model": use_model,
    "analysis": text,
  }
