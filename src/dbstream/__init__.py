from .classes import (
    DatabaseType,
    DatabaseConnectionProvider,
    DBAPIDriver,
    ResultSetIterator,
    StreamingResult,
    StreamingQueryRunner,
    AbstractRowDecoder,
    ColumnDecoder,
    NamedTupleDecoder,
    array_decoder,
    dict_decoder,
    tuple_decoder,
)
from .exceptions import *

__all__ = [
    "DatabaseType",
    "DatabaseConnectionProvider",
    "DBAPIDriver",
    "ResultSetIterator",
    "StreamingResult",
    "StreamingQueryRunner",
    "AbstractRowDecoder",
    "ColumnDecoder",
    "NamedTupleDecoder",
    "array_decoder",
    "dict_decoder",
    "tuple_decoder",
    "QueryExecutionError",
    "AcquisitionError",
    "DecodeError",
    "AdvanceError",
    "DatabaseNotConnected",
    "DatabaseTypeNotSupported",
]
