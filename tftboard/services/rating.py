import random
from typing import Iterable, List, Optional, Sequence

from tftboard.models import FetchResult, MatchSummary, ProfileStats

# ----------------------------
# Ladder bands
# ----------------------------
TIER_ORIGIN = {
  "IRON": 0, "BRONZE": 400, "SILVER": 800, "GOLD": 1200, "PLATINUM": 1600,
  "EMERALD": 2000, "DIAMOND": 2400, "MASTER": 2800, "GRANDMASTER": 3200, "CHALLENGER": 3600,
}
DIVISION_OFFSET = {"IV": 0, "III": 100, "II": 200, "I": 300}
APEX_TIERS = frozenset({"MASTER", "GRANDMASTER", "CHALLENGER"})

# cosmetic LP estimate per placement: (low, high), inclusive
LP_ESTIMATE_RANGE = {
  1: (35, 54), 2: (25, 39), 3: (15, 24), 4: (5, 14),
  5: (-14, -5), 6: (-24, -15), 7: (-34, -25), 8: (-49, -35),
}


def rating_numeric(tier: Optional[str], division: Optional[str], league_points: Optional[int]) -> int:
  t = (tier or "").upper()
  origin = TIER_ORIGIN.get(t, 0)
  lp = league_points or 0
  if t in APEX_TIERS:
    return origin + lp
  return origin + DIVISION_OFFSET.get((division or "").upper(), 0) + lp


def rating_text(tier: Optional[str], division: Optional[str]) -> str:
  t = (tier or "").upper()
  if not t or t == "UNRANKED":
    return "Unranked"
  return f"{t} {division}".strip() if division else t


def _sort_key(r: FetchResult) -> int:
  if not r.success or r.data is None:
    return -1
  return r.data.ranked.rating_numeric or 0


def sort_by_rating(results: Iterable[FetchResult]) -> List[FetchResult]:
  """Highest rating first; failures last. Ties keep batch order (sorted() is stable)."""
  return sorted(results, key=_sort_key, reverse=True)


def calculate_stats(results: Sequence[FetchResult]) -> ProfileStats:
  ok = [r.data for r in results if r.success and r.data is not None]
  if not ok:
    return ProfileStats(total_profiles=len(results))

  ratings = [p.ranked.rating_numeric for p in ok]
  best = max(ok, key=lambda p: p.ranked.rating_numeric)
  return ProfileStats(
      total_profiles=len(results),
      avg_rating=round(sum(ratings) / len(ratings)),
      highest_rank=best.ranked.rating_text or "-",
      total_games=sum(p.ranked.num_games for p in ok),
  )


# ----------------------------
# Match-history helpers
# ----------------------------
def _placed(matches: Sequence[MatchSummary]) -> List[int]:
  return [m.placement for m in matches if m.placement is not None]


def average_placement(matches: Sequence[MatchSummary]) -> Optional[float]:
  placed = _placed(matches)
  if not placed:
    return None
  return round(sum(placed) / len(placed), 2)


def top4_rate(matches: Sequence[MatchSummary]) -> float:
  placed = _placed(matches)
  if not placed:
    return 0.0
  return round(100.0 * sum(1 for p in placed if p <= 4) / len(placed), 1)


def estimate_lp_changes(matches: Sequence[MatchSummary], seed: int = 0) -> List[Optional[int]]:
  """
  Cosmetic LP delta per match, drawn from a placement bucket. Neither data
  source reports per-match LP, so this is display filler only and must not be
  read as rank history. Same seed, same output.
  """
  rng = random.Random(seed)
  out: List[Optional[int]] = []
  for m in matches:
    if m.placement is None:
      out.append(None)
      continue
    lo, hi = LP_ESTIMATE_RANGE[m.placement]
    out.append(rng.randint(lo, hi))
  return out
