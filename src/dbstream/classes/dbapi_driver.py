# Standard imports
import uuid
from collections import deque
from typing import Any, Sequence

# Custom utils and objs
from ..exceptions import DatabaseTypeNotSupported
from .db_cursor import DBConnection, DBCursor, Row
from .database_type import DatabaseType


# PreparedStatement class definition
class PreparedStatement(object):
    """A DB-API cursor paired with the SQL text and the positional params bound to it."""

    def __init__(self, dbapi_cursor:DBCursor, sql:str, connection:DBConnection|None=None):
        self.dbapi_cursor = dbapi_cursor
        self.connection = connection
        self.sql = sql
        self.params:tuple|None = None
        self.closed:bool = False

    def close(self) -> None:
        if self.closed: return
        self.closed = True

        # MySQL: an unbuffered cursor will not close while rows are still pending on the connection
        try:
            if getattr(self.connection, "unread_result", False):
                self.connection.consume_results()
        finally:
            self.dbapi_cursor.close()


# DBAPIResultCursor class definition
class DBAPIResultCursor(object):
    """Positioned cursor over an executed DB-API cursor; rows are pulled in fetchmany([fetch_size]) batches.

        NOTE: [row] is None until the first advance() returns True, and again once advance() returns False
    """

    def __init__(self, statement:PreparedStatement, fetch_size:int=100):
        self.statement = statement
        self.fetch_size = fetch_size
        self.row:Row|None = None
        self.row_number:int = 0
        self.closed:bool = False
        self._buffer:deque = deque()
        self._exhausted:bool = False
        self._column_names:list[str]|None = None

    @property
    def description(self) -> Any|None:
        return self.statement.dbapi_cursor.description

    @property
    def column_names(self) -> list[str]:
        if self._column_names is None:
            self._column_names = [d[0] for d in (self.description or [])]
        return self._column_names

    def advance(self) -> bool:
        """Positions the cursor on the next row; returns False once the result set is exhausted."""
        if self.closed:
            raise ValueError('Cannot advance a closed result cursor.')

        # Refill the buffer from the driver
        if not self._buffer and not self._exhausted:
            batch:list[Row] = self.statement.dbapi_cursor.fetchmany(self.fetch_size)
            if batch: self._buffer.extend(batch)
            else: self._exhausted = True

        if not self._buffer:
            self.row = None
            return False

        self.row = self._buffer.popleft()
        self.row_number += 1
        return True

    def close(self) -> None:
        """Drops buffered rows and closes the underlying DB-API cursor (frees a server-side cursor early)."""
        if self.closed: return
        self.closed = True
        self.row = None
        self._buffer.clear()
        self.statement.close()


# DBAPIDriver class definition
class DBAPIDriver(object):
    """Statement/cursor layer over any PEP 249 connection (sqlite3, mysql.connector, psycopg2).

        NOTE:
            - prepare() opens a DB-API cursor; with [server_side]=True on PostgreSQL a named cursor is used so rows
              stay on the server and are streamed in [fetch_size] batches. Named cursors need a transaction, so on an
              autocommit connection the cursor is opened WITH HOLD (withhold=True)
            - bind() stores the positional params; execute_query() runs cursor.execute() and returns the result cursor
            - release() closes any statement/result cursor/connection handed to it
    """

    database_type:DatabaseType|None         # Database type of the connections this driver is used with (optional)
    fetch_size:int                          # Rows pulled per fetchmany() call
    server_side:bool                        # Use a named (server-side) cursor on PostgreSQL


    def __init__(self, database_type:DatabaseType|None=None, *, fetch_size:int=100, server_side:bool=False):
        if database_type is not None and not isinstance(database_type, DatabaseType):
            raise DatabaseTypeNotSupported(database_type)
        if fetch_size < 1:
            raise ValueError(f'fetch_size must be >= 1, got {fetch_size}')

        self.database_type = database_type
        self.fetch_size = fetch_size
        self.server_side = server_side


    def prepare(self, connection:DBConnection, sql:str) -> PreparedStatement:
        """Opens a cursor on [connection] for [sql]."""

        match self.database_type:

            # POSTGRESQL - named cursors are server-side in psycopg2
            case DatabaseType.POSTGRESQL if self.server_side:
                dbapi_cursor:DBCursor = connection.cursor(
                    name=f'dbstream_{uuid.uuid4().hex}',
                    withhold=bool(getattr(connection, "autocommit", False)),
                )
                dbapi_cursor.itersize = self.fetch_size

            # MYSQL, SQLITE, or client-side POSTGRESQL
            case _:
                dbapi_cursor = connection.cursor()

        # Hint the driver's batch size where supported
        try: dbapi_cursor.arraysize = self.fetch_size
        except Exception: pass

        return PreparedStatement(dbapi_cursor, sql, connection)


    def bind(self, statement:PreparedStatement, args:Sequence[Any]|None) -> None:
        """Binds [args] positionally, in order."""
        if args is None:
            statement.params = None
        elif isinstance(args, (str, bytes)) or not isinstance(args, Sequence):
            raise TypeError(f'Query args must be a positional sequence, got {type(args).__name__}')
        else:
            statement.params = tuple(args)


    def execute_query(self, statement:PreparedStatement) -> DBAPIResultCursor:
        """Executes the bound statement and returns a result cursor positioned before the first row."""

        # Execute with parameters
        if statement.params:
            statement.dbapi_cursor.execute(statement.sql, statement.params)

        # Execute without parameters
        else:
            statement.dbapi_cursor.execute(statement.sql)

        return DBAPIResultCursor(statement, fetch_size=self.fetch_size)


    def release(self, resource:Any) -> None:
        """Closes a statement, result cursor, or connection."""
        resource.close()
