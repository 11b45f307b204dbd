import json
import logging
import re
from typing import Any, List, Optional, Tuple

from ..models.request_models import OperationMode, OperationRequest, Statement
from ..utils.error_handling import (
  INVALID_OBJECT_NAME,
  INVALID_PARAMETERS,
  MISSING_QUERY,
  format_error,
  missing_object_name,
)

logger = logging.getLogger(__name__)

ROW_PRODUCING_PREFIXES = ("SELECT", "SHOW", "DESCRIBE", "EXPLAIN", "CALL")

# name, schema.name, either part optionally back-quoted
_IDENTIFIER_PART = r"(?:[A-Za-z0-9_$]+|`(?:[^`]|``)+`)"
IDENTIFIER_PATTERN = re.compile(rf"{_IDENTIFIER_PART}(?:\.{_IDENTIFIER_PART})?")

def reject_constant(name: str) -> Any:
  # NaN and Infinity are not JSON
  raise ValueError(f"invalid JSON constant {name}")

def parse_arguments(parameters: str) -> Tuple[bool, List[Any], Optional[Exception]]:
  """
  Decodes the JSON array of positional arguments

  Returns: (success, args, error)
  """
  if not parameters:
      return True, [], None

  try:
      args = json.loads(parameters, parse_constant=reject_constant)
  except ValueError as e:
      return False, [], e

  if args is None:
      return True, [], None

  if not isinstance(args, list):
      return False, [], ValueError(
          f"expected a JSON array, got {type(args).__name__}"
      )

  return True, args, None

def returns_rows(query: str) -> bool:
  return query.strip().upper().startswith(ROW_PRODUCING_PREFIXES)

def placeholders(count: int) -> str:
  return ",".join(["?"] * count)

class StatementService:
  def __init__(self, strict_identifiers: bool = False):
      self.strict_identifiers = strict_identifiers

  def build(self, operation: OperationRequest) -> Tuple[bool, Optional[Statement], Optional[str]]:
      """
      Builds the SQL statement for the requested mode

      Table, procedure and function names are interpolated into the text,
      only procedure/function arguments are bound.

      Returns: (success, statement, error_message)
      """
      mode = operation.mode

      if mode == OperationMode.TABLE:
          success, error = self._check_object_name(operation)
          if not success:
              return False, None, error
          statement = Statement(text=f"SELECT * FROM {operation.object_name}")

      elif mode in (OperationMode.STORED_PROCEDURE, OperationMode.STORED_FUNCTION):
          success, error = self._check_object_name(operation)
          if not success:
              return False, None, error

          args_ok, args, args_error = parse_arguments(operation.parameters)
          if not args_ok:
              logger.info("Rejecting %s arguments: %s", mode.value, args_error)
              return False, None, format_error(INVALID_PARAMETERS, args_error)

          keyword = "CALL" if mode == OperationMode.STORED_PROCEDURE else "SELECT"
          statement = Statement(
              text=f"{keyword} {operation.object_name}({placeholders(len(args))})",
              args=args
          )

      else:
          if not operation.query:
              return False, None, MISSING_QUERY
          statement = Statement(
              text=operation.query,
              returns_rows=returns_rows(operation.query)
          )

      logger.debug(
          "Built %s statement (%d args, returns_rows=%s): %s",
          mode.value, len(statement.args), statement.returns_rows, statement.text
      )
      return True, statement, None

  def _check_object_name(self, operation: OperationRequest) -> Tuple[bool, Optional[str]]:
      if not operation.object_name:
          return False, missing_object_name(operation.mode.value)

      if self.strict_identifiers and not IDENTIFIER_PATTERN.fullmatch(operation.object_name):
          logger.info("Rejecting object name %r", operation.object_name)
          return False, f"{INVALID_OBJECT_NAME}: {operation.object_name}"

      return True, None
