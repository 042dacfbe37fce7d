import hashlib, json, time
from typing import Any, Dict, Optional

_CACHE: Dict[str, Dict[str, Any]] = {}


def ai_cache_get(key: str) -> Optional[str]:
  v = _CACHE.get(key)
  if not v:
    return None
  if v["exp"] < time.time():
    _CACHE.pop(key, None)
    return None
  return v["val"]


def ai_cache_set(key: str, val: str, ttl: int = 3600) -> None:
  _CACHE[key] = {"val": val, "exp": time.time() + ttl}


def ai_cache_clear() -> None:
  _CACHE.clear()


def key_for(payload: dict, prefix: str = "gm") -> str:
  h = hashlib.sha256(json.dumps(payload, sort_keys=True, ensure_ascii=False).encode("utf-8")).hexdigest()
  return f"{prefix}:{h}"
