# tftboard/fetcher.py
import asyncio
import random
from typing import Any, Optional

import httpx

from tftboard.errors import (
  AuthError,
  ConnectivityError,
  NotFoundError,
  RateLimitError,
  UpstreamError,
)
from tftboard.util.log import get_logger

log = get_logger("tftboard.fetcher", "HTTP")

RELAY_HINT = "Cannot connect to proxy. Start the relay with: tftboard-proxy"


def new_client(timeout: float, **kwargs) -> httpx.AsyncClient:
  """AsyncClient with the per-call `timeout` (seconds) and a 5s connect limit."""
  return httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=5.0), **kwargs)


def _body(r: httpx.Response) -> Any:
  try:
    return r.json()
  except ValueError:
    return {}


def _upstream_message(body: Any) -> Optional[str]:
  if not isinstance(body, dict):
    return None
  status = body.get("status")
  if isinstance(status, dict) and status.get("message"):
    return str(status["message"])
  err = body.get("error")
  if isinstance(err, dict):
    return err.get("message")
  return str(err) if err else None


def classify(r: httpx.Response) -> Any:
  """Map one response to its JSON body or a typed error."""
  code = r.status_code
  if 200 <= code < 300:
    if code == 204 or not r.content:
      return None
    try:
      return r.json()
    except ValueError:
      raise UpstreamError("Invalid JSON in upstream response", status_code=code)

  body = _body(r)
  if code == 401:
    raise AuthError("Invalid API key. Please check your Riot API key.", status_code=code)
  if code == 403:
    raise AuthError("API key expired or forbidden. Please regenerate your key.", status_code=code)
  if code == 404:
    raise NotFoundError(_upstream_message(body) or "Summoner not found.", status_code=code)
  if code == 429:
    retry_after = r.headers.get("Retry-After")
    raise RateLimitError(
        retry_after=float(retry_after) if retry_after and retry_after.replace(".", "", 1).isdigit() else None,
        limit_type=r.headers.get("X-Rate-Limit-Type"),
    )
  if code >= 500:
    raise UpstreamError(_upstream_message(body) or f"Server error {code}", status_code=code)
  raise UpstreamError(_upstream_message(body) or f"HTTP error {code}", status_code=code)


async def _fetch_once(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    headers: Optional[dict],
    params: Optional[dict],
    json_body: Any,
    hint: Optional[str],
) -> Any:
  try:
    r = await client.request(method, url, headers=headers, params=params, json=json_body)
  except httpx.TimeoutException as e:
    message = f"Request to {url} timed out ({e.__class__.__name__})."
    raise ConnectivityError(f"{message} {hint}" if hint else message)
  except httpx.RequestError as e:
    lead = hint or f"Cannot reach {httpx.URL(url).host}."
    raise ConnectivityError(f"{lead} ({e})")
  return classify(r)


def _retry_delay(err: Exception, attempt: int) -> float:
  if isinstance(err, RateLimitError) and err.retry_after:
    return max(1.0, err.retry_after)
  return 0.5 * (2 ** attempt) + random.uniform(0, 0.25)


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    method: str = "GET",
    headers: Optional[dict] = None,
    params: Optional[dict] = None,
    json_body: Any = None,
    retries: int = 0,
    hint: Optional[str] = None,
) -> Any:
  """
  Single HTTP call with status classification:
    - 2xx -> parsed JSON,
    - 401/403 -> AuthError, 404 -> NotFoundError, 429 -> RateLimitError,
    - 5xx -> UpstreamError, network failure -> ConnectivityError.
  `retries` > 0 enables bounded retry with jitter for 429 / connectivity
  failures only; the default of 0 returns the first outcome.
  `hint` replaces the generic connectivity message (the relay hint when
  calls go through the local proxy).
  """
  attempt = 0
  while True:
    try:
      return await _fetch_once(client, method, url, headers, params, json_body, hint)
    except (RateLimitError, ConnectivityError) as e:
      if attempt >= retries:
        raise
      delay = _retry_delay(e, attempt)
      attempt += 1
      log.warning("%s on %s, retry %d/%d in %.2fs", e.__class__.__name__, url, attempt, retries, delay)
      await asyncio.sleep(delay)
