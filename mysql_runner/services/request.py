import json
import logging
import re
from typing import Optional, Tuple

from pydantic import ValidationError

from ..models.request_models import (
  ConnectorInput,
  ConnectionConfig,
  ExtractedRequest,
  OperationMode,
  OperationRequest,
)
from ..utils.error_handling import DECODE_ERROR, MISSING_CONNECTION_FIELDS, format_error

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3306
LEADING_INTEGER = re.compile(r"[+-]?\d+")
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

def parse_port(value: str, current: int) -> int:
  """
  Takes the leading integer of value; without one, or when it overflows
  a 64-bit integer, the current port is kept
  """
  match = LEADING_INTEGER.match(value)
  if not match:
      return current
  port = int(match.group(0))
  if port < INT64_MIN or port > INT64_MAX:
      return current
  return port

class RequestService:
  def decode(self, raw: str) -> Tuple[bool, Optional[ConnectorInput], Optional[str]]:
      """
      Decodes the first JSON value of raw into the request envelope

      Returns: (success, request, error_message)
      """
      try:
          text = raw.lstrip()
          document, end = json.JSONDecoder().raw_decode(text)
          if end < len(text.rstrip()):
              logger.debug("Ignoring %d trailing characters after request", len(text) - end)
          request = ConnectorInput.model_validate(document)
          return True, request, None
      except (ValueError, ValidationError) as e:
          # json.JSONDecodeError is a ValueError
          logger.info("Request could not be decoded: %s", e)
          return False, None, format_error(DECODE_ERROR, e)

  def extract(self, request: ConnectorInput) -> Tuple[bool, Optional[ExtractedRequest], Optional[str]]:
      """
      Walks the parameter list once, later duplicates overwrite earlier ones

      Returns: (success, extracted_request, error_message)
      """
      host = ""
      port = 0
      username = ""
      password = ""
      dbname = ""
      data_type = OperationMode.QUERY.value
      object_name = ""
      query = ""
      parameters = ""

      for param in request.params or []:
          value = param.compvalue.strip()
          name = param.inputname.lower()

          if name == "host":
              host = value
          elif name == "port":
              port = parse_port(value, port)
          elif name == "username":
              username = value
          elif name == "password":
              password = value
          elif name == "dbname":
              dbname = value
          elif name == "data_type":
              if value:
                  data_type = value.lower()
          elif name == "object_name":
              object_name = value
          elif name == "query":
              query = value
          elif name == "parameters":
              parameters = value

      if not host or not username or not dbname:
          logger.info("Rejecting request without host, username or dbname")
          return False, None, MISSING_CONNECTION_FIELDS

      if port == 0:
          port = DEFAULT_PORT

      connection = ConnectionConfig(
          host=host,
          port=port,
          user=username,
          password=password,
          database=dbname
      )
      operation = OperationRequest(
          mode=OperationMode.parse(data_type),
          object_name=object_name,
          query=query,
          parameters=parameters
      )
      logger.debug(
          "Extracted %s request for %s@%s:%d/%s",
          operation.mode.value, username, host, port, dbname
      )
      return True, ExtractedRequest(connection=connection, operation=operation), None
