# tftboard/gemini_client.py
import os
from typing import List, Optional

import httpx

from tftboard.config import GEMINI_API_URL
from tftboard.errors import ConfigurationError, UpstreamError
from tftboard.fetcher import fetch_json
from tftboard.util.ai_cache import ai_cache_get, ai_cache_set, key_for
from tftboard.util.log import get_logger

# -----------------------------------------------------------------------------
# Logging & env toggles
# -----------------------------------------------------------------------------
log = get_logger("tftboard.gemini_client", "GM")

OFFLINE = os.getenv("OFFLINE_GEMINI", "").strip() == "1"

GENERATION_CONFIG = {"temperature": 0.7, "maxOutputTokens": 4096}
# content generation is slower than the stats APIs
GEMINI_TIMEOUT = httpx.Timeout(60.0, connect=5.0)


def _require_key(api_key: str) -> str:
  if not api_key:
    raise ConfigurationError("No Gemini API key configured. Set GEMINI_API_KEY.")
  return api_key


def _raise_on_error(data: dict) -> None:
  err = data.get("error")
  if err:
    raise UpstreamError(err.get("message", "Gemini request failed") if isinstance(err, dict) else str(err))


def _extract_text(data: dict) -> str:
  """
  generateContent response -> first text part.
  Expected:
  {
    "candidates": [
      {"content": {"parts": [{"text": "..."}]}}
    ]
  }
  """
  _raise_on_error(data)
  candidates = data.get("candidates") or []
  if not candidates:
    raise UpstreamError("No response from AI")
  parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
  for part in parts:
    if isinstance(part, dict) and part.get("text"):
      return part["text"]
  raise UpstreamError("No text in response")


def _offline_stub(prompt: str) -> str:
  return (
    "## OVERVIEW\nSolid fundamentals with room to stabilise bottom-four games. "
    "Commit to one opener per patch and track the average placement over the next 10 games."
  )


def _http(client: Optional[httpx.AsyncClient]) -> httpx.AsyncClient:
  return client or httpx.AsyncClient(timeout=GEMINI_TIMEOUT)


# -----------------------------------------------------------------------------
# Model listing
# -----------------------------------------------------------------------------
async def list_models(api_key: str, *, client: Optional[httpx.AsyncClient] = None) -> List[str]:
  """Model names (without the "models/" prefix) that support generateContent."""
  key = _require_key(api_key)
  http = _http(client)
  try:
    data = await fetch_json(http, f"{GEMINI_API_URL}/models", params={"key": key})
  finally:
    if client is None:
      await http.aclose()

  if not isinstance(data, dict):
    raise UpstreamError("Unexpected model list response")
  _raise_on_error(data)
  return [
    str(m.get("name", "")).replace("models/", "", 1)
    for m in (data.get("models") or [])
    if "generateContent" in (m.get("supportedGenerationMethods") or [])
  ]


# -----------------------------------------------------------------------------
# One-shot generation
# -----------------------------------------------------------------------------
async def generate(
    prompt: str,
    model: str,
    api_key: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    use_cache: bool = True,
) -> str:
  if OFFLINE:
    return _offline_stub(prompt)
  key = _require_key(api_key)

  cache_key: Optional[str] = None
  if use_cache:
    cache_key = key_for({"model": model, "prompt": prompt, **GENERATION_CONFIG})
    hit = ai_cache_get(cache_key)
    if hit is not None:
      log.info("generate cache hit model=%s", model)
      return hit

  body = {
    "contents": [{"parts": [{"text": prompt}]}],
    "generationConfig": GENERATION_CONFIG,
  }
  http = _http(client)
  try:
    data = await fetch_json(
        http,
        f"{GEMINI_API_URL}/models/{model}:generateContent",
        method="POST",
        params={"key": key},
        json_body=body,
    )
  finally:
    if client is None:
      await http.aclose()

  if not isinstance(data, dict):
    raise UpstreamError("Unexpected generateContent response")
  text = _extract_text(data)
  log.info("generate model=%s response len=%d", model, len(text))

  if use_cache and cache_key is not None:
    ai_cache_set(cache_key, text)
  return text
