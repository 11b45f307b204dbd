from enum import Enum
from pydantic import BaseModel, model_validator
from typing import Optional, Dict, Any, List

class Param(BaseModel):
  inputname: str = ""
  compvalue: str = ""

  @model_validator(mode="before")
  @classmethod
  def lower_keys(cls, data: Any) -> Any:
      # Envelope keys match case-insensitively, null leaves the field empty
      if isinstance(data, dict):
          return {
              str(key).lower(): value
              for key, value in data.items()
              if value is not None
          }
      return data

class ConnectorInput(BaseModel):
  params: Optional[List[Param]] = None

  @model_validator(mode="before")
  @classmethod
  def lower_keys(cls, data: Any) -> Any:
      # A null document decodes to an empty request
      if data is None:
          return {}
      if isinstance(data, dict):
          return {str(key).lower(): value for key, value in data.items()}
      return data

class ConnectionConfig(BaseModel):
  host: str
  port: int = 3306
  user: str
  password: str = ""
  database: str

class OperationMode(str, Enum):
  QUERY = "query"
  TABLE = "table"
  STORED_PROCEDURE = "stored_procedure"
  STORED_FUNCTION = "stored_function"

  @classmethod
  def parse(cls, value: Optional[str]) -> "OperationMode":
      """
      Maps a data_type value onto a mode, anything unknown runs as a raw query
      """
      normalized = (value or "").strip().lower()
      for mode in cls:
          if mode.value == normalized:
              return mode
      return cls.QUERY

class OperationRequest(BaseModel):
  mode: OperationMode = OperationMode.QUERY
  object_name: str = ""
  query: str = ""
  parameters: str = ""

class ExtractedRequest(BaseModel):
  connection: ConnectionConfig
  operation: OperationRequest

class Statement(BaseModel):
  text: str
  args: List[Any] = []
  returns_rows: bool = True

class ExecutionOutcome(BaseModel):
  rows: Optional[List[Dict[str, Any]]] = None
  effect: Optional[Dict[str, int]] = None
