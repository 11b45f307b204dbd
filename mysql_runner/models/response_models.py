from pydantic import BaseModel
from typing import Optional, Dict, Any

OK_RESULT = "OK"

class ConnectorResponse(BaseModel):
  result: Optional[Any] = None
  error: Optional[str] = None

  def to_output(self) -> Dict[str, Any]:
      """
      Only one of result/error is ever written, error wins
      """
      if self.error:
          return {"error": self.error}
      return {"result": self.result}
