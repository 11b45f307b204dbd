from typing import Optional

DECODE_ERROR = "failed to decode input"
INVALID_PARAMETERS = "invalid parameters"
INVALID_OBJECT_NAME = "invalid object_name"
CONNECT_ERROR = "failed to connect"
PING_ERROR = "failed to ping db"
EXECUTION_ERROR = "execution error"
SCAN_ERROR = "scan error"
INTERNAL_ERROR = "internal error"

MISSING_CONNECTION_FIELDS = "host, username, and dbname are required"
MISSING_QUERY = "query is required"

def missing_object_name(mode: str) -> str:
  return f"object_name is required for {mode}"

def describe_error(error: Optional[BaseException]) -> str:
  """
  Renders an exception for the user, driver errors are kept verbatim

  mysql.connector errors already carry errno and SQLSTATE in str(),
  e.g. "1146 (42S02): Table 'shop.nope' doesn't exist".
  """
  if error is None:
      return "unknown error"
  message = str(error)
  if not message:
      return type(error).__name__
  return message

def format_error(prefix: str, error: Optional[BaseException]) -> str:
  return f"{prefix}: {describe_error(error)}"
