from fastapi import HTTPException, Request

from tftboard.errors import (
  AuthError,
  ConfigurationError,
  NotFoundError,
  RateLimitError,
  TFTBoardError,
)
from tftboard.services.store import ProfileStore

_STATUS = (
  (ConfigurationError, 400),
  (AuthError, 401),
  (NotFoundError, 404),
  (RateLimitError, 429),
)


def to_http(e: TFTBoardError) -> HTTPException:
  for kind, status in _STATUS:
    if isinstance(e, kind):
      return HTTPException(status, str(e))
  return HTTPException(502, str(e))


def get_store(request: Request) -> ProfileStore:
  return request.app.state.store
