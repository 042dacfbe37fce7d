import os
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

#Endpoints
METATFT_BASE_URL = os.getenv("METATFT_BASE_URL", "https://api.metatft.com/public/profile")
GEMINI_API_URL = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
PROXY_BASE_URL = os.getenv("PROXY_BASE_URL", "http://localhost:3001/riot-proxy")
PROXY_PORT = int(os.getenv("PROXY_PORT", "3001"))

TFT_SET = os.getenv("TFT_SET", "TFTSet16")
ROSTER_FILE = os.getenv("ROSTER_FILE", "roster.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"

# Platform routing values (summoner / league)
PLATFORMS = {
  "VN2": "vn2", "BR1": "br1", "EUN1": "eun1", "EUW1": "euw1", "JP1": "jp1",
  "KR": "kr", "LA1": "la1", "LA2": "la2", "NA1": "na1", "OC1": "oc1",
  "PH2": "ph2", "RU": "ru", "SG2": "sg2", "TH2": "th2", "TR1": "tr1", "TW2": "tw2",
}

# Regional routing values (account / match). SEA platforms use asia for account-v1.
REGIONALS = {
  "VN2": "asia", "PH2": "asia", "SG2": "asia", "TH2": "asia", "TW2": "asia",
  "BR1": "americas", "LA1": "americas", "LA2": "americas", "NA1": "americas", "OC1": "americas",
  "EUN1": "europe", "EUW1": "europe", "RU": "europe", "TR1": "europe",
  "JP1": "asia", "KR": "asia",
}
DEFAULT_REGIONAL = "sea"

# routing names the proxy recognises as regional hosts
REGIONAL_ROUTES = ("sea", "americas", "europe", "asia")

DATA_SOURCES = ("metatft", "riot")

#Pipeline sizes
MATCH_ID_COUNT = 20
MATCH_DETAIL_COUNT = 5


class Settings(BaseModel):
  riot_api_key: str = ""
  gemini_api_key: str = ""
  gemini_model: str = DEFAULT_GEMINI_MODEL
  data_source: str = "metatft"
  use_proxy: bool = True
  proxy_base_url: str = PROXY_BASE_URL
  http_timeout: float = HTTP_TIMEOUT
  max_retries: int = 0

  @property
  def is_riot_source(self) -> bool:
    return self.data_source == "riot"


def _flag(name: str, default: str) -> bool:
  return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
  """
  Read the settings store. Called at the start of every fetch cycle so
  that key / source changes in the environment are picked up without a restart.
  """
  source = os.getenv("DATA_SOURCE", "metatft").strip().lower()
  if source not in DATA_SOURCES:
    source = "metatft"
  return Settings(
      riot_api_key=os.getenv("RIOT_API_KEY", "").strip(),
      gemini_api_key=os.getenv("GEMINI_API_KEY", "").strip(),
      gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL).strip() or DEFAULT_GEMINI_MODEL,
      data_source=source,
      use_proxy=_flag("USE_PROXY", "1"),
      proxy_base_url=os.getenv("PROXY_BASE_URL", PROXY_BASE_URL).rstrip("/"),
      http_timeout=float(os.getenv("HTTP_TIMEOUT", "10")),
      max_retries=int(os.getenv("RIOT_MAX_RETRIES", "0")),
  )
