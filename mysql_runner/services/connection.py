import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from mysql.connector import Error as MySQLError
from mysql.connector.connection import MySQLConnection

from ..models.request_models import ConnectionConfig
from ..utils.error_handling import CONNECT_ERROR, PING_ERROR, format_error

logger = logging.getLogger(__name__)

class DatabaseConnectionManager:
  def __init__(
      self,
      connection_factory: Callable[[], Any] = MySQLConnection,
      connect_timeout: Optional[int] = None
  ):
      self.connection_factory = connection_factory
      self.connect_timeout = connect_timeout

  def connection_arguments(self, config: ConnectionConfig) -> Dict[str, Any]:
      """
      Driver arguments for config; temporal columns decode to native values
      and every statement commits on its own
      """
      arguments = {
          "host": config.host,
          "port": config.port,
          "user": config.user,
          "password": config.password,
          "database": config.database,
          "autocommit": True,
          "raw": False,
          "consume_results": True,
      }
      if self.connect_timeout:
          arguments["connection_timeout"] = self.connect_timeout
      return arguments

  def connect(self, config: ConnectionConfig) -> Tuple[bool, Any, Optional[str]]:
      """
      Establishes a connection to MySQL with given configuration

      Configuring the connection object and reaching the server fail with
      different messages.

      Returns: (success, connection, error_message)
      """
      start_time = time.time()

      try:
          connection = self.connection_factory()
          connection.config(**self.connection_arguments(config))
      except (MySQLError, AttributeError, TypeError, ValueError) as err:
          logger.info("Could not configure connection: %s", err)
          return False, None, format_error(CONNECT_ERROR, err)

      try:
          connection.connect()
          connection.ping()
      except (MySQLError, OSError, OverflowError) as err:
          logger.info("Could not reach %s:%d: %s", config.host, config.port, err)
          self.close_connection(connection)
          return False, None, format_error(PING_ERROR, err)

      logger.debug(
          "Connected to %s:%d/%s in %.3fs",
          config.host, config.port, config.database, time.time() - start_time
      )
      return True, connection, None

  def close_connection(self, connection: Any) -> Tuple[bool, Optional[Exception]]:
      """
      Closes a database connection
      Returns: (success, error_if_any)
      """
      try:
          if connection.is_connected():
              connection.close()
          return True, None
      except (MySQLError, OSError) as err:
          logger.info("Error while closing connection: %s", err)
          return False, err
