# Standard imports
import logging
from typing import Any

# Imports for DB drivers
import mysql.connector as mysql
import psycopg2 as psql
import psycopg2.extensions as _psql_ext
import sqlite3 as sqlite

from mysql.connector import MySQLConnection
from psycopg2.extensions import connection as PSQLConnection
from sqlite3 import Connection as SQLiteConnection

# Custom utils and objs
from ..utils.loggable import Loggable
from ..exceptions import DatabaseNotConnected, DatabaseTypeNotSupported
from .database_type import DatabaseType


# DatabaseConnectionProvider class definition
class DatabaseConnectionProvider(Loggable):
    """Opens a new connection to the configured database on every acquire() call (no pooling).

        NOTE:
            - Connection failures are logged and raised as DatabaseNotConnected
            - The caller (normally a StreamingQueryRunner) owns and closes every connection it acquires
    """

    database_type:DatabaseType                              # The DatabaseType for this instance
    P:str                                                   # The placeholder for this DB type (%s or ?)


    def __init__(
            self,
            database_type:DatabaseType,
            host:str,
            username:str,
            password:str,
            *,
            port:int|None=None,
            database:str|None=None,
            enable_logging:bool=True,
            log_file_path:str='./database_connection.log',
            logger_name:str='database_connection_logger',
            logger_min_level:int=logging.DEBUG,
            logger_format:str="%(asctime)s - %(levelname)s: %(message)s"
        ):

        # Validate the database type
        if not isinstance(database_type, DatabaseType):
            raise DatabaseTypeNotSupported(database_type)

        # Set port if None is given
        if port is None:
            match database_type:
                case DatabaseType.MYSQL: port = 3306
                case DatabaseType.POSTGRESQL: port = 5432

        # SQLite needs a file path
        if database_type is DatabaseType.SQLITE and not database:
            raise ValueError("For SQLite, 'database' must be a file path or ':memory:'.")

        # Set the base attributes
        self.database_type = database_type
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.database = database
        self.P = database_type.placeholder

        # Setup logging if configured
        self.init_logging(enable_logging, log_file_path, logger_name, logger_min_level, logger_format)


    def _connect(self) -> MySQLConnection|PSQLConnection|SQLiteConnection:
        """Opens a connection based on [self.database_type]."""

        match self.database_type:

            # MYSQL DATABASE
            case DatabaseType.MYSQL:
                return mysql.connect(
                    database=self.database,
                    host=self.host,
                    port=self.port,
                    user=self.username,
                    password=self.password,
                    consume_results=True,   # NOTE: lets a partly read result be discarded on early close
                )

            # POSTGRESQL DATABASE
            case DatabaseType.POSTGRESQL:
                return psql.connect(
                    dbname=self.database,
                    host=self.host,
                    port=self.port,
                    user=self.username,
                    password=self.password
                )

            # SQLITE DATABASE
            case DatabaseType.SQLITE:
                return sqlite.connect(self.database)

            # UNSUPPORTED
            case _:
                raise DatabaseTypeNotSupported(self.database_type)


    def acquire(self) -> MySQLConnection|PSQLConnection|SQLiteConnection:
        """Returns a new, open connection; raises DatabaseNotConnected if it cannot be opened."""
        try:
            cxn = self._connect()
        except Exception as e:
            self.log_error('acquire()', e)
            raise DatabaseNotConnected(f'{type(e).__name__} - {e}') from e

        self.log_debug('acquire()', f'Opened {self.database_type.name} connection.')
        return cxn


    def is_connected(self, cxn:Any) -> bool:
        """Returns True if [cxn] is open and healthy, False otherwise (does not raise Exceptions)."""

        # Base case: cxn is None
        if cxn is None: return False

        # Check based on db type
        match self.database_type:
            case DatabaseType.MYSQL:
                try:
                    cxn.ping(reconnect=False, attempts=1, delay=0)
                    return True
                except Exception:
                    pass
            case DatabaseType.POSTGRESQL:
                if getattr(cxn, "closed", 1) == 0 and getattr(cxn, "status", _psql_ext.STATUS_BAD) != _psql_ext.STATUS_BAD:
                    return True
            case DatabaseType.SQLITE:
                try:
                    cxn.execute('SELECT 1;')
                    return True
                except sqlite.ProgrammingError:
                    pass

        # Not connected if we make it here
        return False
