# Standard imports
from typing import Any, Iterator

# Custom utils and objs
from ..exceptions import AdvanceError, DecodeError
from .db_cursor import ResultCursor, RowDecoder


# ResultSetIterator class definition
class ResultSetIterator(Iterator[Any]):
    """Forward-only, single-pass iterator that decodes one cursor row per pull, with one row of lookahead.

        NOTE:
            - The constructor advances the cursor once, so a failing first advance raises AdvanceError and no iterator exists
            - has_next() only reads the cached lookahead flag; it never touches the cursor
            - Once a decode/advance error is raised the iterator is terminal: has_next() stays False
            - The iterator never closes the cursor; release belongs to StreamingResult
    """

    cursor:ResultCursor         # The positioned result cursor
    decoder:RowDecoder          # Converts the current row into the value returned by next()
    _has_next:bool              # Lookahead flag from the last advance
    _terminal:bool              # Set on exhaustion or failure; never cleared
    _row_number:int             # 1-indexed number of the row the cursor is on (0 = before the first row)


    def __init__(self, cursor:ResultCursor, decoder:RowDecoder):
        self.cursor = cursor
        self.decoder = decoder
        self._row_number = 0
        self._terminal = False
        self._has_next = False
        self._advance()


    def _advance(self) -> None:
        """Moves the cursor forward one row and refreshes the lookahead flag."""
        try:
            self._has_next = bool(self.cursor.advance())
        except Exception as e:
            self._has_next = False
            self._terminal = True
            raise AdvanceError(self._row_number, e) from e

        if self._has_next:
            self._row_number += 1
        else:
            self._terminal = True


    def has_next(self) -> bool:
        """Returns True if another decoded value can be pulled (idempotent probe)."""
        return self._has_next


    def __iter__(self) -> "ResultSetIterator":
        return self


    def __next__(self) -> Any:

        # Nothing buffered
        if not self._has_next:
            raise StopIteration

        # Decode the current row
        try:
            value:Any = self.decoder(self.cursor)
        except Exception as e:
            self._has_next = False
            self._terminal = True
            raise DecodeError(self._row_number, e) from e

        # Refresh the lookahead for the following call
        self._advance()
        return value


    # Pairs with has_next() for explicit pull loops
    next = __next__
