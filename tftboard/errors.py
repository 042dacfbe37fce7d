"""Error types raised by the fetchers and clients."""

from typing import Optional


class TFTBoardError(Exception):
  """Base error carrying an optional upstream status code."""

  def __init__(self, message: str, status_code: Optional[int] = None):
    super().__init__(message)
    self.message = message
    self.status_code = status_code

  def __str__(self) -> str:
    return self.message


class AuthError(TFTBoardError):
  """401 / 403 - invalid, expired or forbidden credential."""


class NotFoundError(TFTBoardError):
  """404 - player or match does not exist."""


class RateLimitError(TFTBoardError):
  """429 - surfaced to the caller, never retried by default."""

  def __init__(
      self,
      message: str = "Rate limit exceeded. Please wait and try again.",
      status_code: Optional[int] = 429,
      retry_after: Optional[float] = None,
      limit_type: Optional[str] = None,
  ):
    super().__init__(message, status_code)
    self.retry_after = retry_after
    self.limit_type = limit_type


class UpstreamError(TFTBoardError):
  """5xx or an otherwise unusable upstream response."""


class ConnectivityError(TFTBoardError):
  """The remote host (or the local relay) could not be reached."""


class ConfigurationError(TFTBoardError):
  """A required setting, e.g. an API key, is missing."""
