from .database_type import DatabaseType
from .connection_provider import DatabaseConnectionProvider
from .dbapi_driver import DBAPIDriver, DBAPIResultCursor, PreparedStatement
from .result_set_iterator import ResultSetIterator
from .streaming_result import StreamingResult
from .streaming_query_runner import StreamingQueryRunner
from .row_decoders import AbstractRowDecoder, ColumnDecoder, NamedTupleDecoder, array_decoder, dict_decoder, tuple_decoder
