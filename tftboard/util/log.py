import logging

from tftboard.config import LOG_LEVEL


def get_logger(name: str, tag: str) -> logging.Logger:
  """Named logger with a tagged stream handler, installed once per name."""
  log = logging.getLogger(name)
  if not log.handlers:
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter(f"[{tag}] %(levelname)s: %(message)s"))
    log.addHandler(h)
    log.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))
  return log
