from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from tftboard.config import load_settings
from tftboard.routes.profiles import router as profiles_router
from tftboard.routes.analysis import router as analysis_router
from tftboard.services.store import ProfileStore
from tftboard.util.log import get_logger

log = get_logger("tftboard.main", "Startup")

settings = load_settings()
log.info("data source: %s, proxy: %s", settings.data_source, settings.proxy_base_url if settings.use_proxy else "off")

app = FastAPI(title = "TFT Board")
app.state.store = ProfileStore()

#health check
@app.get("/api/health", response_class = PlainTextResponse)
async def health():
    return "ok"

#register API routes
app.include_router(profiles_router)
app.include_router(analysis_router)
