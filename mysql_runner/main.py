import logging
import sys
import time
from typing import Any, Callable, Dict, Optional

from mysql.connector.connection import MySQLConnection

from .config import RunnerSettings, configure_logging
from .models.request_models import ExecutionOutcome
from .models.response_models import OK_RESULT
from .services.connection import DatabaseConnectionManager
from .services.query import QueryService
from .services.request import RequestService
from .services.statement import StatementService
from .utils.error_handling import DECODE_ERROR, INTERNAL_ERROR, format_error
from .utils.formatting import dump_response, format_response

logger = logging.getLogger(__name__)

# Initialize services
request_service = RequestService()
query_service = QueryService()

def render_outcome(outcome: ExecutionOutcome) -> Any:
	if outcome.rows is not None:
		return outcome.rows
	if outcome.effect is not None:
		return outcome.effect
	return OK_RESULT

def handle_request(
	raw: str,
	settings: Optional[RunnerSettings] = None,
	connection_factory: Callable[[], Any] = MySQLConnection
) -> Dict[str, Any]:
	"""
	Runs one request through decode, extract, connect, build and execute

	Every stage reports (success, value, error); the first error becomes
	the response and nothing after it runs.
	"""
	settings = settings or RunnerSettings()
	start_time = time.time()

	success, request, error = request_service.decode(raw)
	if not success:
		return format_response(error=error)

	success, extracted, error = request_service.extract(request)
	if not success:
		return format_response(error=error)

	db_connection_manager = DatabaseConnectionManager(
		connection_factory=connection_factory,
		connect_timeout=settings.connect_timeout
	)
	success, connection, error = db_connection_manager.connect(extracted.connection)
	if not success:
		return format_response(error=error)

	try:
		statement_service = StatementService(strict_identifiers=settings.strict_identifiers)
		success, statement, error = statement_service.build(extracted.operation)
		if not success:
			return format_response(error=error)

		success, outcome, error = query_service.execute_statement(connection, statement)
		if not success:
			return format_response(error=error)

		logger.debug("Request handled in %.3fs", time.time() - start_time)
		return format_response(result=render_outcome(outcome))

	finally:
		# Always release the connection, the response does not depend on it
		db_connection_manager.close_connection(connection)

def run(
	raw: str,
	settings: Optional[RunnerSettings] = None,
	connection_factory: Callable[[], Any] = MySQLConnection
) -> str:
	"""
	Produces the single JSON document written for raw
	"""
	try:
		response = handle_request(raw, settings, connection_factory)
		return dump_response(response)
	except Exception as e:
		logger.info("Request aborted by unexpected error", exc_info=True)
		return dump_response(format_response(error=format_error(INTERNAL_ERROR, e)))

def main() -> int:
	settings = RunnerSettings.from_env()
	configure_logging(settings)

	try:
		raw = sys.stdin.read()
	except (OSError, UnicodeDecodeError) as e:
		output = dump_response(format_response(error=format_error(DECODE_ERROR, e)))
	else:
		output = run(raw, settings)

	sys.stdout.write(output + "\n")
	sys.stdout.flush()
	return 0

if __name__ == "__main__":
	sys.exit(main())
