from pydantic import BaseModel, Field
from typing import Any, List, Literal, Optional, Union
from urllib.parse import unquote


class PlayerIdentity(BaseModel, frozen=True):
  region: str
  game_name: str
  tag_line: str
  display_name: str

  @property
  def decoded_game_name(self) -> str:
    # roster entries may carry URL-encoded names (e.g. "Guen%20Mori")
    return unquote(self.game_name)


# ----------------------------
# Riot upstream shapes
# ----------------------------
class Account(BaseModel):
  puuid: str
  gameName: str = ""
  tagLine: str = ""


class Summoner(BaseModel):
  id: Optional[str] = None  # absent for some platforms (VN2, ...)
  puuid: str
  summonerLevel: int = 0
  profileIconId: int = 0


class RankedEntry(BaseModel):
  queueType: Optional[str] = None
  tier: str = "UNRANKED"
  rank: Optional[str] = None
  leaguePoints: int = 0
  wins: int = 0
  losses: int = 0


class TFTParticipant(BaseModel):
  puuid: str
  placement: Optional[int] = None
  level: Optional[int] = None
  last_round: Optional[int] = None
  traits: List[Any] = []
  units: List[Any] = []
  augments: List[Any] = []


class TFTMatchInfo(BaseModel):
  game_datetime: Optional[int] = None
  game_length: Optional[float] = None
  participants: List[TFTParticipant] = []


class TFTMatch(BaseModel):
  metadata: dict = {}
  info: TFTMatchInfo = Field(default_factory=TFTMatchInfo)


# ----------------------------
# Common profile shape
# ----------------------------
class NormalizedRanking(BaseModel):
  tier: str = "UNRANKED"
  rank: str = ""
  league_points: int = 0
  wins: int = 0
  losses: int = 0
  rating_text: str = "Unranked"
  rating_numeric: int = 0
  num_games: int = 0


class MatchSummary(BaseModel):
  match_id: str
  placement: Optional[int] = Field(default=None, ge=1, le=8)
  game_datetime: Optional[Union[int, str]] = None
  game_length: Optional[float] = None
  units: List[Any] = []
  traits: List[Any] = []
  augments: List[Any] = []
  level: Optional[int] = None
  last_round: Optional[int] = None


class SummonerInfo(BaseModel):
  riot_id: str
  puuid: str = ""
  summoner_id: Optional[str] = None
  summoner_level: Optional[int] = None
  profile_icon_id: Optional[int] = None


class Profile(BaseModel):
  summoner: SummonerInfo
  ranked: NormalizedRanking = Field(default_factory=NormalizedRanking)
  matches: List[MatchSummary] = []
  ranked_rating_changes: List[dict] = []


Source = Literal["metatft", "riot"]


class FetchResult(BaseModel):
  success: bool
  identity: PlayerIdentity
  source: Source
  data: Optional[Profile] = None
  error: Optional[str] = None

  @classmethod
  def ok(cls, identity: PlayerIdentity, data: Profile, source: Source) -> "FetchResult":
    return cls(success=True, identity=identity, data=data, source=source)

  @classmethod
  def fail(cls, identity: PlayerIdentity, error: str, source: Source) -> "FetchResult":
    return cls(success=False, identity=identity, error=error, source=source)


class ProfileStats(BaseModel):
  total_profiles: int = 0
  avg_rating: int = 0
  highest_rank: str = "-"
  total_games: int = 0


class ProfilesResponse(BaseModel):
  source: Source
  stats: ProfileStats
  results: List[FetchResult] = []


class AnalysisRequest(BaseModel):
  mode: Literal["all", "top10", "select"] = "all"
  selected: List[int] = []
  model: Optional[str] = None
