import json
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Any, List, Optional

from ..models.response_models import ConnectorResponse

def format_response(
  result: Optional[Any] = None,
  error: Optional[str] = None
) -> Dict[str, Any]:
  """
  Creates the output object written to stdout
  """
  return ConnectorResponse(result=result, error=error).to_output()

def normalize_value(value: Any) -> Any:
  """
  Binary column values come back as text
  """
  if isinstance(value, (bytes, bytearray)):
      return bytes(value).decode("utf-8", errors="replace")
  return value

def format_rows_to_dict(cursor, rows) -> List[Dict[str, Any]]:
  """
  Converts database rows to list of dictionaries using column names
  """
  if not cursor.description:
      return []

  field_names = [i[0] for i in cursor.description]
  result = []

  for row in rows:
      row_dict = {}
      for i, field_name in enumerate(field_names):
          row_dict[field_name] = normalize_value(row[i])
      result.append(row_dict)

  return result

def format_timedelta(value: timedelta) -> str:
  # TIME columns may be negative or exceed 24 hours
  micros = (value.days * 86400 + value.seconds) * 1000000 + value.microseconds
  sign = "-" if micros < 0 else ""
  total, microseconds = divmod(abs(micros), 1000000)
  hours, remainder = divmod(total, 3600)
  minutes, seconds = divmod(remainder, 60)
  text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
  if microseconds:
      text += f".{microseconds:06d}"
  return text

def json_default(value: Any) -> Any:
  if isinstance(value, datetime):
      if value.tzinfo is None:
          return value.isoformat() + "Z"
      return value.isoformat()
  if isinstance(value, date):
      # DATE columns render as midnight timestamps
      return datetime.combine(value, time()).isoformat() + "Z"
  if isinstance(value, time):
      return value.isoformat()
  if isinstance(value, timedelta):
      return format_timedelta(value)
  if isinstance(value, Decimal):
      return str(value)
  if isinstance(value, (set, frozenset)):
      return ",".join(sorted(str(item) for item in value))
  if isinstance(value, (bytes, bytearray)):
      return normalize_value(value)
  raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

def dump_response(response: Dict[str, Any]) -> str:
  return json.dumps(response, default=json_default, separators=(",", ":"))
