# Standard imports
from abc import ABC, abstractmethod
from collections import namedtuple
from typing import Any

# Custom utils and objs
from .db_cursor import ResultCursor


# AbstractRowDecoder class definition
class AbstractRowDecoder(ABC):
    """Base class for row decoders that keep state (e.g. a resolved column index).

        NOTE:
            - Any plain callable taking the positioned cursor works as a decoder; subclassing is optional
            - decode_row() is called once per row, in row order, and must not advance the cursor
    """

    def __call__(self, cursor:ResultCursor) -> Any:
        return self.decode_row(cursor)

    @abstractmethod
    def decode_row(self, cursor:ResultCursor) -> Any:
        """Converts the row [cursor] is positioned on into a value."""


def tuple_decoder(cursor:ResultCursor) -> tuple:
    """Returns the current row as a tuple."""
    return tuple(cursor.row)


def array_decoder(cursor:ResultCursor) -> list:
    """Returns the current row as a list with one element per column, in column order."""
    return list(cursor.row)


def dict_decoder(cursor:ResultCursor) -> dict[str, Any]:
    """Returns the current row as a {column name: value} dict."""
    return dict(zip(cursor.column_names, cursor.row))


class ColumnDecoder(AbstractRowDecoder):
    """Returns a single column's value from each row, selected by 0-based index or by column name."""

    def __init__(self, column:int|str=0):
        self.column = column
        self._columns:tuple|None = None        # Column names [_index] was resolved against
        self._index:int|None = None

    def decode_row(self, cursor:ResultCursor) -> Any:

        if isinstance(self.column, int):
            return cursor.row[self.column]

        # Resolve the name again whenever the result columns change (decoder reused across queries)
        names:list[str] = cursor.column_names
        if self._columns != tuple(names):
            if self.column not in names:
                raise KeyError(f'Column "{self.column}" not in result columns {names}')
            self._index = names.index(self.column)
            self._columns = tuple(names)

        return cursor.row[self._index]


class NamedTupleDecoder(AbstractRowDecoder):
    """Returns each row as a namedtuple whose fields are the result's column names."""

    def __init__(self, name:str='Row'):
        self.name = name
        self._row_type:type|None = None
        self._columns:tuple|None = None        # Column names [_row_type] was built from

    def decode_row(self, cursor:ResultCursor) -> tuple:

        # Build the type from the result columns, rebuilding it if they change
        # NOTE: rename=True so names like "count(*)" become positional fields (_0, _1, ...)
        names:tuple = tuple(cursor.column_names)
        if self._row_type is None or self._columns != names:
            self._row_type = namedtuple(self.name, names, rename=True)
            self._columns = names

        return self._row_type(*cursor.row)
