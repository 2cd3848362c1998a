from __future__ import annotations
from typing import Protocol, Any, Mapping, Sequence, Callable, TypeVar, runtime_checkable

# NOTE: rows can be tuples (default) or dict-like
Row = Any
T = TypeVar("T", covariant=True)


@runtime_checkable
class DBCursor(Protocol):
    """The subset of a PEP 249 cursor that the DB-API driver relies on."""

    # Common DB-API attributes
    description: Any | None
    rowcount: int

    # Core execution methods
    def execute(
        self,
        operation: str,
        params: Sequence[Any] | Mapping[str, Any] | None = None,
    ) -> Any: ...

    # Fetch methods
    def fetchone(self) -> Row | None: ...
    def fetchmany(self, size: int = ...) -> list[Row]: ...

    # Lifecycle
    def close(self) -> None: ...


@runtime_checkable
class DBConnection(Protocol):
    """The subset of a PEP 249 connection that the DB-API driver relies on."""

    def cursor(self, *args: Any, **kwargs: Any) -> DBCursor: ...
    def close(self) -> None: ...


@runtime_checkable
class ResultCursor(Protocol):
    """A positioned result cursor: [row] is the current row once advance() has returned True."""

    row: Row | None
    row_number: int

    @property
    def description(self) -> Any | None: ...

    @property
    def column_names(self) -> list[str]: ...

    def advance(self) -> bool: ...
    def close(self) -> None: ...


# A row decoder converts the row the cursor is positioned on into a value; it must not advance the cursor
RowDecoder = Callable[[ResultCursor], T]


@runtime_checkable
class ConnectionProvider(Protocol):
    """Hands out connections; raises DatabaseNotConnected when none can be acquired."""

    def acquire(self) -> Any: ...


@runtime_checkable
class StatementDriver(Protocol):
    """Statement/cursor layer used by the StreamingQueryRunner."""

    def prepare(self, connection: Any, sql: str) -> Any: ...
    def bind(self, statement: Any, args: Sequence[Any] | None) -> None: ...
    def execute_query(self, statement: Any) -> ResultCursor: ...
    def release(self, resource: Any) -> None: ...
