import logging
import os
import sys
from typing import Mapping, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ENV_PREFIX = "MYSQL_RUNNER_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
TRUE_VALUES = ("1", "true", "yes", "on")

class RunnerSettings(BaseModel):
  log_level: str = "WARNING"
  strict_identifiers: bool = False
  connect_timeout: Optional[int] = None

  @classmethod
  def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RunnerSettings":
      """
      Reads MYSQL_RUNNER_* variables, bad values keep the defaults
      """
      environ = os.environ if environ is None else environ
      settings = cls()

      log_level = environ.get(ENV_PREFIX + "LOG_LEVEL", "").strip().upper()
      if log_level:
          if isinstance(logging.getLevelName(log_level), int):
              settings.log_level = log_level
          else:
              logger.info("Ignoring unknown log level %r", log_level)

      strict = environ.get(ENV_PREFIX + "STRICT_IDENTIFIERS", "").strip().lower()
      settings.strict_identifiers = strict in TRUE_VALUES

      timeout = environ.get(ENV_PREFIX + "CONNECT_TIMEOUT", "").strip()
      if timeout:
          try:
              settings.connect_timeout = int(timeout)
          except ValueError:
              logger.info("Ignoring non-numeric connect timeout %r", timeout)
          else:
              if settings.connect_timeout <= 0:
                  logger.info("Ignoring non-positive connect timeout %r", timeout)
                  settings.connect_timeout = None

      return settings

def configure_logging(settings: RunnerSettings) -> None:
  """
  Diagnostics go to stderr, stdout carries only the JSON response
  """
  root = logging.getLogger()
  if not root.handlers:
      handler = logging.StreamHandler(sys.stderr)
      handler.setFormatter(logging.Formatter(LOG_FORMAT))
      root.addHandler(handler)
  root.setLevel(settings.log_level)
