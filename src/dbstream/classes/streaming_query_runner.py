# Standard imports
import logging
from typing import Any, Sequence

# Custom utils and objs
from ..utils.general import release_all
from ..utils.loggable import Loggable
from ..exceptions import AcquisitionError, DatabaseNotConnected, QueryExecutionError
from .db_cursor import ConnectionProvider, ResultCursor, RowDecoder, StatementDriver
from .dbapi_driver import DBAPIDriver
from .result_set_iterator import ResultSetIterator
from .row_decoders import tuple_decoder
from .streaming_result import StreamingResult


# StreamingQueryRunner class definition
class StreamingQueryRunner(Loggable):
    """Runs a query and returns its rows as a lazily decoded StreamingResult that owns the query's resources.

        Two connection modes:
            - Owned: no [connection] is passed to execute(); one is acquired from [self.provider] and closed together
              with the statement and cursor when the result is closed or exhausted
            - Borrowed: the caller passes an open [connection]; it is never closed here, only the statement and
              cursor are

        NOTE:
            - If preparing, binding, executing, or reading the first row fails, everything acquired so far is
              released (reverse order) before the error is raised, and no StreamingResult is returned
            - Errors hit while releasing during that rollback are swallowed (logged as warnings)
    """

    provider:ConnectionProvider|None                        # Source of connections for owned mode
    driver:StatementDriver                                  # Prepares/binds/executes statements and releases resources


    def __init__(
            self,
            provider:ConnectionProvider|None=None,
            driver:StatementDriver|None=None,
            *,
            enable_logging:bool=True,
            log_file_path:str='./database_connection.log',
            logger_name:str='streaming_query_runner_logger',
            logger_min_level:int=logging.DEBUG,
            logger_format:str="%(asctime)s - %(levelname)s: %(message)s"
        ):

        # Default to the DB-API driver for the provider's database type
        if driver is None:
            driver = DBAPIDriver(getattr(provider, 'database_type', None))

        self.provider = provider
        self.driver = driver

        # Setup logging if configured
        self.init_logging(enable_logging, log_file_path, logger_name, logger_min_level, logger_format)


    def _acquire_connection(self, sql:str) -> Any:
        """Acquires a connection from the provider, raising AcquisitionError(stage="connect") on failure."""

        try:
            if self.provider is None:
                raise DatabaseNotConnected('no connection provider configured and no connection given')
            return self.provider.acquire()

        # Handle exceptions
        except Exception as e:
            self.log_error('execute() [connect]', e)
            raise AcquisitionError('connect', e, sql) from e


    def _check_borrowed(self, connection:Any, sql:str) -> None:
        """Rejects a borrowed connection the provider reports as unhealthy."""
        is_connected = getattr(self.provider, 'is_connected', None)
        if is_connected is not None and not is_connected(connection):
            e = DatabaseNotConnected('the given connection is closed or unhealthy')
            self.log_error('execute() [connect]', e)
            raise AcquisitionError('connect', e, sql) from e


    def _on_rollback_error(self, resource:Any, e:Exception) -> None:
        self.log_warning('execute()', f'Could not release {type(resource).__name__} during rollback: {type(e).__name__} - {e}')


    def execute(
        self,
        sql:str,
        args:Sequence[Any]|None=None,
        decoder:RowDecoder=tuple_decoder,
        *,
        connection:Any=None,
    ) -> StreamingResult:
        """Executes [sql] with positional [args] and returns a StreamingResult of [decoder]-ed rows.

            NOTE:
                - Close the result (or use it in a `with` block) if it is not iterated to the end
                - Raises AcquisitionError if connecting, preparing, binding, or executing fails, and AdvanceError if
                  reading the first row fails
        """

        # 1. Connection (owned or borrowed)
        owns_connection:bool = connection is None
        if owns_connection:
            connection = self._acquire_connection(sql)
        else:
            self._check_borrowed(connection, sql)

        # Resources in acquisition order
        acquired:list[Any] = [connection] if owns_connection else []
        stage:str = 'prepare'

        try:
            # 2. Statement + positional args
            statement:Any = self.driver.prepare(connection, sql)
            acquired.append(statement)

            stage = 'bind'
            self.driver.bind(statement, args)

            # 3. Cursor
            stage = 'execute'
            cursor:ResultCursor = self.driver.execute_query(statement)
            acquired.append(cursor)

            # 4. Lazy rows (reads the first row)
            stage = 'advance'
            rows:ResultSetIterator = ResultSetIterator(cursor, decoder)

        # Roll back everything acquired so far, then raise
        # NOTE: also on KeyboardInterrupt/SystemExit, which are re-raised unchanged
        except BaseException as e:
            self.log_error(f'execute() [{stage}]', e)
            release_all(reversed(acquired), self.driver.release, self._on_rollback_error)

            if not isinstance(e, Exception):
                raise
            if isinstance(e, QueryExecutionError):
                e.sql = sql
                raise
            raise AcquisitionError(stage, e, sql) from e

        # 5. Bind the resources to the result
        try: column_names:list[str] = list(cursor.column_names)
        except Exception: column_names = []

        self.log_debug('execute()', f'Streaming results for: {sql}')
        return StreamingResult(
            rows,
            acquired,
            self.driver.release,
            column_names=column_names,
            logger=self.logger,
        )
