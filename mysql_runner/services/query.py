import logging
import time
from typing import Any, Optional, Tuple

from mysql.connector import Error as MySQLError

from ..models.request_models import ExecutionOutcome, Statement
from ..utils.error_handling import EXECUTION_ERROR, SCAN_ERROR, format_error
from ..utils.formatting import format_rows_to_dict

logger = logging.getLogger(__name__)

def non_negative(value: Optional[int]) -> int:
  # The driver reports None or -1 when a count does not apply
  if not value or value < 0:
      return 0
  return int(value)

class QueryService:
  def execute_statement(
      self,
      connection: Any,
      statement: Statement
  ) -> Tuple[bool, Optional[ExecutionOutcome], Optional[str]]:
      """
      Executes a built statement and reads its rows or effect summary

      Statements with arguments go through a prepared cursor, which binds
      the ? placeholders server-side.

      Returns: (success, outcome, error_message)
      """
      cursor = None
      start_time = time.time()

      try:
          try:
              if statement.args:
                  cursor = connection.cursor(prepared=True)
                  cursor.execute(statement.text, statement.args)
              else:
                  cursor = connection.cursor()
                  cursor.execute(statement.text)
          except (MySQLError, TypeError, ValueError) as e:
              logger.info("Statement failed: %s", e)
              return False, None, format_error(EXECUTION_ERROR, e)

          if statement.returns_rows:
              try:
                  rows = cursor.fetchall() if cursor.description else []
                  result = format_rows_to_dict(cursor, rows)
              except MySQLError as e:
                  logger.info("Reading rows failed: %s", e)
                  return False, None, format_error(SCAN_ERROR, e)
              outcome = ExecutionOutcome(rows=result)
              logger.debug(
                  "Fetched %d rows in %.3fs", len(result), time.time() - start_time
              )
          else:
              outcome = ExecutionOutcome(effect={
                  "last_insert_id": non_negative(cursor.lastrowid),
                  "rows_affected": non_negative(cursor.rowcount),
              })
              logger.debug(
                  "Statement affected %d rows in %.3fs",
                  outcome.effect["rows_affected"], time.time() - start_time
              )

          return True, outcome, None

      finally:
          if cursor is not None:
              try:
                  cursor.close()
              except MySQLError as e:
                  logger.info("Error while closing cursor: %s", e)
