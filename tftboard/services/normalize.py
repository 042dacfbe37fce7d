"""
Map the two upstream schemas onto the common Profile shape.

  - MetaTFT `full_profile` blobs are already close to it: keys are renamed and
    gaps filled.
  - Riot responses are assembled field by field from the pipeline stages.

Either way: rating_text is never empty, num_games == wins + losses and
matches is always a list.
"""
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from tftboard.errors import UpstreamError
from tftboard.models import (
  Account,
  MatchSummary,
  NormalizedRanking,
  Profile,
  RankedEntry,
  Summoner,
  SummonerInfo,
  TFTMatch,
)
from tftboard.services.rating import rating_numeric, rating_text
from tftboard.util.log import get_logger

log = get_logger("tftboard.normalize", "NORM")

RANKED_TFT = "RANKED_TFT"


def unranked() -> NormalizedRanking:
  return NormalizedRanking()


def pick_tft_entry(entries: Sequence[RankedEntry]) -> Optional[RankedEntry]:
  for e in entries:
    if e.queueType == RANKED_TFT:
      return e
  return entries[0] if entries else None


def normalize_ranking(entry: Optional[RankedEntry]) -> NormalizedRanking:
  if entry is None:
    return unranked()
  return NormalizedRanking(
      tier=entry.tier,
      rank=entry.rank or "",
      league_points=entry.leaguePoints,
      wins=entry.wins,
      losses=entry.losses,
      rating_text=rating_text(entry.tier, entry.rank),
      rating_numeric=rating_numeric(entry.tier, entry.rank, entry.leaguePoints),
      num_games=entry.wins + entry.losses,
  )


def summarize_match(match_id: str, detail: Optional[TFTMatch], puuid: str) -> MatchSummary:
  if detail is None:
    return MatchSummary(match_id=match_id)
  info = detail.info
  me = next((p for p in info.participants if p.puuid == puuid), None)
  if me is None:
    log.warning("Player %s not among participants of %s", puuid, match_id)
    return MatchSummary(match_id=match_id, game_datetime=info.game_datetime, game_length=info.game_length)
  return MatchSummary(
      match_id=match_id,
      placement=me.placement or None,
      game_datetime=info.game_datetime,
      game_length=info.game_length,
      traits=me.traits,
      units=me.units,
      augments=me.augments,
      level=me.level,
      last_round=me.last_round,
  )


def normalize_riot(
    account: Account,
    summoner: Summoner,
    entry: Optional[RankedEntry],
    match_ids: Sequence[str],
    details: Sequence[Optional[TFTMatch]],
) -> Profile:
  """
  `details` lines up with the head of `match_ids`; ids past its end (or with
  a None detail) keep a placeholder entry, so len(matches) == len(match_ids).
  """
  matches = [
    summarize_match(mid, details[i] if i < len(details) else None, account.puuid)
    for i, mid in enumerate(match_ids)
  ]
  return Profile(
      summoner=SummonerInfo(
          riot_id=f"{account.gameName}#{account.tagLine}",
          puuid=account.puuid,
          summoner_id=summoner.id,
          summoner_level=summoner.summonerLevel,
          profile_icon_id=summoner.profileIconId,
      ),
      ranked=normalize_ranking(entry),
      matches=matches,
  )


# ----------------------------
# MetaTFT
# ----------------------------
def _int(x: Any, default: int = 0) -> int:
  try:
    return int(x)
  except (TypeError, ValueError, OverflowError):
    return default


def _metatft_ranking(raw: Any) -> NormalizedRanking:
  if not isinstance(raw, dict) or not raw:
    return unranked()

  tier = str(raw.get("tier") or "UNRANKED").upper()
  rank = str(raw.get("rank") or raw.get("division") or "")
  lp = _int(raw.get("league_points", raw.get("leaguePoints")))
  wins = _int(raw.get("wins"))
  losses = _int(raw.get("losses"))

  if "wins" in raw or "losses" in raw:
    num_games = wins + losses
  else:
    num_games = _int(raw.get("num_games"))

  numeric = raw.get("rating_numeric")
  text = raw.get("rating_text") or rating_text(tier, rank)
  return NormalizedRanking(
      tier=tier,
      rank=rank,
      league_points=lp,
      wins=wins,
      losses=losses,
      rating_text=str(text) or "Unranked",
      rating_numeric=_int(numeric) if numeric is not None else rating_numeric(tier, rank, lp),
      num_games=num_games,
  )


def _metatft_match(raw: Dict[str, Any], idx: int) -> MatchSummary:
  summary = raw.get("summary") if isinstance(raw.get("summary"), dict) else {}
  placement = _int(raw.get("placement", summary.get("placement"))) or None
  return MatchSummary(
      match_id=str(raw.get("match_id") or raw.get("riot_match_id") or raw.get("id") or f"match-{idx}"),
      placement=placement,
      game_datetime=raw.get("game_datetime") or raw.get("match_timestamp"),
      game_length=summary.get("game_length") or raw.get("game_length"),
      units=summary.get("units") or raw.get("units") or [],
      traits=summary.get("traits") or raw.get("traits") or [],
      augments=summary.get("augments") or raw.get("augments") or [],
      level=summary.get("level") or raw.get("level"),
      last_round=summary.get("last_round"),
  )


def normalize_metatft(raw: Any, riot_id: str = "") -> Profile:
  """`riot_id` is the fallback when the blob has no summoner block."""
  if not isinstance(raw, dict):
    raise UpstreamError(f"Unexpected MetaTFT response shape: {type(raw).__name__}")

  summ = raw.get("summoner") if isinstance(raw.get("summoner"), dict) else {}
  matches_raw = raw.get("matches") if isinstance(raw.get("matches"), list) else []
  changes = raw.get("ranked_rating_changes") if isinstance(raw.get("ranked_rating_changes"), list) else []

  try:
    matches: List[MatchSummary] = [
      _metatft_match(m, i) for i, m in enumerate(matches_raw) if isinstance(m, dict)
    ]
    return Profile(
        summoner=SummonerInfo(
            riot_id=str(summ.get("riot_id") or riot_id),
            puuid=str(summ.get("puuid") or ""),
            summoner_id=summ.get("summoner_id"),
            summoner_level=summ.get("summoner_level"),
            profile_icon_id=summ.get("profile_icon_id"),
        ),
        ranked=_metatft_ranking(raw.get("ranked")),
        matches=matches,
        ranked_rating_changes=[c for c in changes if isinstance(c, dict)],
    )
  except ValidationError as e:
    log.error("Rejected MetaTFT payload: %s", e)
    raise UpstreamError("Unexpected MetaTFT response shape")
