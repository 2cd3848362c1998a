
class DatabaseNotConnected(ConnectionError):
    """Raised when a connection cannot be acquired from the provider, or a borrowed connection is not healthy."""

    def __init__(self, detail:str|None=None):
        self.detail = detail
        message:str = 'The database is not connected or the connection is not healthy.'
        if detail: message = f'{message} ({detail})'
        super().__init__(message)

    def __reduce__(self):
        return (self.__class__, (self.detail,), self.__dict__)


class DatabaseTypeNotSupported(ValueError):
    """Raised when a provider or driver has a database_type that is not one of the Enum values in the DatabaseType class."""

    def __init__(self, db_type:str|int):
        self.db_type = db_type
        super().__init__(f'The current database_type "{db_type}" is not supported. See the DatabaseType enum class for supported types.')

    def __reduce__(self):
        return (self.__class__, (self.db_type,), self.__dict__)


class QueryExecutionError(RuntimeError):
    """Base class for the primary errors raised while producing a streamed query result.

        - [stage] names the step that failed (connect, prepare, bind, execute, advance, decode)
        - The underlying driver/decoder exception is always chained as __cause__

        NOTE: subclasses keep their constructor arguments in [_init_args] so pickle/copy rebuild them correctly
    """

    def __init__(self, stage:str, message:str, sql:str|None=None):
        self.stage = stage
        self.sql = sql
        if not hasattr(self, '_init_args'): self._init_args = (stage, message, sql)
        super().__init__(f'{stage} failed: {message}')

    def __reduce__(self):
        return (self.__class__, self._init_args, self.__dict__)


class AcquisitionError(QueryExecutionError):
    """Raised when acquiring the connection, preparing/binding the statement, or executing the query fails."""

    def __init__(self, stage:str, cause:BaseException, sql:str|None=None):
        self._init_args = (stage, cause, sql)
        super().__init__(stage, f'{type(cause).__name__} - {cause}', sql)


class DecodeError(QueryExecutionError):
    """Raised when the row decoder fails on a row; [row_number] is 1-indexed."""

    def __init__(self, row_number:int, cause:BaseException):
        self._init_args = (row_number, cause)
        self.row_number = row_number
        super().__init__('decode', f'row {row_number}: {type(cause).__name__} - {cause}')


class AdvanceError(QueryExecutionError):
    """Raised when the cursor fails to move to the next row; [row_number] is the last row successfully positioned (0 = none)."""

    def __init__(self, row_number:int, cause:BaseException):
        self._init_args = (row_number, cause)
        self.row_number = row_number
        super().__init__('advance', f'after row {row_number}: {type(cause).__name__} - {cause}')
