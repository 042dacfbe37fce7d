# tftboard/proxy.py
"""
Riot API relay for the browser dashboard.

  /riot-proxy/{region}/{path}  ->  https://{region}.api.riotgames.com/{path}?{query}

`region` is either a regional route (sea, americas, europe, asia) or a
platform id (vn2, na1, ...). The X-Riot-Token header is required and
re-attached upstream; status, JSON body and rate-limit headers come back as-is.
Run with `tftboard-proxy` or `uvicorn tftboard.proxy:app --port 3001`.
"""
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tftboard.config import HTTP_TIMEOUT, PROXY_PORT, REGIONAL_ROUTES
from tftboard.fetcher import new_client
from tftboard.util.log import get_logger

log = get_logger("tftboard.proxy", "Proxy")

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
BODY_METHODS = ("POST", "PUT", "PATCH")
RELAYED_HEADERS = ("X-Rate-Limit-Type", "Retry-After")


def resolve_host(region: str) -> str:
  token = region.lower()
  if token in REGIONAL_ROUTES:
    return f"https://{token}.api.riotgames.com"
  # platform id; builds the host exactly like a regional route
  return f"https://{token}.api.riotgames.com"


def target_url(region: str, path: str, query: str = "") -> str:
  url = f"{resolve_host(region)}/{path}"
  return f"{url}?{query}" if query else url


def create_app(upstream: Optional[httpx.AsyncClient] = None) -> FastAPI:

  @asynccontextmanager
  async def lifespan(app: FastAPI):
    owned = getattr(app.state, "upstream", None) is None
    if owned:
      app.state.upstream = new_client(HTTP_TIMEOUT)
    log.info("Riot API Proxy running on port %d", PROXY_PORT)
    yield
    if owned:
      await app.state.upstream.aclose()

  app = FastAPI(title="Riot API Proxy", lifespan=lifespan)
  app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
  if upstream is not None:
    app.state.upstream = upstream

  @app.get("/health")
  async def health():
    return {"status": "ok", "message": "Riot API Proxy is running"}

  @app.api_route("/riot-proxy/{region}/{path:path}", methods=METHODS)
  async def forward(region: str, path: str, request: Request):
    api_key = request.headers.get("x-riot-token")
    if not api_key:
      return JSONResponse({"error": "Missing X-Riot-Token header"}, status_code=401)

    url = target_url(region, path, request.url.query)
    log.info("%s %s", request.method, url)

    content = None
    if request.method in BODY_METHODS:
      content = await request.body() or None

    headers = {
      "X-Riot-Token": api_key,
      "Accept": "application/json",
      "Content-Type": "application/json",
    }
    try:
      r = await request.app.state.upstream.request(request.method, url, headers=headers, content=content)
    except httpx.HTTPError as e:
      message = str(e) or e.__class__.__name__
      log.error("%s %s failed: %s", request.method, url, message)
      return JSONResponse({"error": message}, status_code=500)

    try:
      data = r.json()
    except ValueError:
      data = {}

    relayed = {h: r.headers[h] for h in RELAYED_HEADERS if h in r.headers}
    return JSONResponse(data, status_code=r.status_code, headers=relayed)

  return app


app = create_app()


def run() -> None:
  uvicorn.run("tftboard.proxy:app", host="0.0.0.0", port=PROXY_PORT)
