from fastapi import APIRouter, Depends

from tftboard.config import load_settings
from tftboard.errors import TFTBoardError
from tftboard.gemini_client import list_models
from tftboard.models import AnalysisRequest
from tftboard.routes.common import get_store, to_http
from tftboard.services.analysis import analyze_player
from tftboard.services.store import ProfileStore

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


@router.get("/models")
async def get_models():
  settings = load_settings()
  try:
    models = await list_models(settings.gemini_api_key)
  except TFTBoardError as e:
    raise to_http(e)
  return {"selected": settings.gemini_model, "models": models}


@router.post("/{display_name}")
async def analyze(display_name: str, payload: AnalysisRequest, store: ProfileStore = Depends(get_store)):
  try:
    return await analyze_player(
        display_name,
        store,
        load_settings(),
        mode=payload.mode,
        selected=payload.selected,
        model=payload.model,
    )
  except TFTBoardError as e:
    raise to_http(e)
