# Standard imports
import logging
from typing import Any, Callable, Iterator, Sequence

import pandas as pd

# Custom utils and objs
from ..utils.general import release_all
from .result_set_iterator import ResultSetIterator


# StreamingResult class definition
class StreamingResult(Iterator[Any]):
    """Iterator over decoded rows that owns the resources (cursor, statement, connection) used to produce them.

        Iteration, has_next(), the fetch*() helpers and the DataFrame helpers all pull from the wrapped
        ResultSetIterator. The bound resources are released exactly once, in reverse acquisition order, on the
        first of:
            - close() (explicit, or leaving a `with` block)
            - exhaustion (a pull leaves no next row, or finds none)
            - any error raised by a pull (resources are released before the error is re-raised)

        NOTE:
            - close() is idempotent; calling it after exhaustion or after an error is safe and does nothing
            - Failures while releasing a resource are swallowed (logged as warnings if a [logger] is given) and never
              replace the error that triggered the close. This trades visibility of bugs in close() for a guarantee
              that every resource is attempted and the consumer sees the original error
            - Not thread-safe; serialize access externally if a result is shared between threads
    """

    def __init__(
            self,
            rows:ResultSetIterator,
            resources:Sequence[Any],
            release:Callable[[Any], None],
            *,
            column_names:list[str]|None=None,
            logger:logging.Logger|None=None,
        ):
        self._rows = rows
        self._resources:list[Any] = list(resources)     # Acquisition order
        self._release = release
        self._logger = logger
        self._closed:bool = False
        self.column_names:list[str] = list(column_names or [])


    # ---- Lifecycle ---- #
    @property
    def closed(self) -> bool:
        return self._closed


    def close(self) -> None:
        """Releases the bound resources in reverse acquisition order (no-op if already closed)."""
        if self._closed: return
        self._closed = True

        resources, self._resources = self._resources, []
        release_all(reversed(resources), self._release, self._on_release_error)


    def _on_release_error(self, resource:Any, e:Exception) -> None:
        if self._logger is not None:
            self._logger.warning("close() error (non-critical): could not release %s: %s - %s", type(resource).__name__, type(e).__name__, e)


    def __enter__(self) -> "StreamingResult":
        return self


    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


    # ---- Pulling values ---- #
    def has_next(self) -> bool:
        """Returns True if another value can be pulled (side-effect free)."""
        return not self._closed and self._rows.has_next()


    def __iter__(self) -> "StreamingResult":
        return self


    def __next__(self) -> Any:

        # Closed results behave like exhausted ones
        if self._closed:
            raise StopIteration

        # Nothing left: release now
        if not self._rows.has_next():
            self.close()
            raise StopIteration

        # Pull, releasing on any failure before it reaches the consumer
        try:
            value:Any = next(self._rows)
        except BaseException:
            self.close()
            raise

        # Release as soon as the last row has been handed out
        if not self._rows.has_next():
            self.close()

        return value


    # Pairs with has_next() for explicit pull loops
    next = __next__


    def fetchone(self) -> Any|None:
        """Returns the next value, or None if there are no more."""
        return next(self, None)


    def fetchmany(self, size:int) -> list[Any]:
        """Returns up to [size] values (fewer only when the result is exhausted)."""
        values:list[Any] = []
        if size < 1: return values
        for value in self:
            values.append(value)
            if len(values) >= size: break
        return values


    def fetchall(self) -> list[Any]:
        """Returns all remaining values."""
        return list(self)


    # ---- DataFrame helpers ---- #
    def _as_df(self, values:list[Any]) -> pd.DataFrame:
        """Builds a DataFrame from decoded values, naming the columns when the values are row-shaped."""

        # Mapping rows carry their own column names
        if values and isinstance(values[0], dict):
            return pd.DataFrame.from_records(values)

        # Row-shaped tuples/lists get the cursor's column names if the widths match
        if self.column_names and (not values or (isinstance(values[0], (tuple, list)) and len(values[0]) == len(self.column_names))):
            return pd.DataFrame.from_records(values, columns=self.column_names)

        # Anything else (e.g. single column values) is left for pandas to infer
        return pd.DataFrame(values)


    def to_df(self) -> pd.DataFrame:
        """Drains all remaining values into a DataFrame."""
        return self._as_df(self.fetchall())


    def iter_dfs(self, chunksize:int) -> Iterator[pd.DataFrame]:
        """Yields DataFrames of at most [chunksize] rows until the result is exhausted."""
        if chunksize < 1:
            raise ValueError(f'chunksize must be >= 1, got {chunksize}')

        while True:
            values:list[Any] = self.fetchmany(chunksize)
            if not values: return
            yield self._as_df(values)
