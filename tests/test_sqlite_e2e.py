import sqlite3

import pandas as pd
import pytest

from dbstream import (
    AcquisitionError,
    ColumnDecoder,
    DatabaseConnectionProvider,
    DatabaseType,
    DBAPIDriver,
    NamedTupleDecoder,
    StreamingQueryRunner,
    dict_decoder,
)


@pytest.fixture
def sqlite_provider(tmp_path):
    """A SQLite provider over a fresh file DB with a 5-row "people" table."""
    db_path = str(tmp_path / "people.db")

    cxn = sqlite3.connect(db_path)
    cxn.execute("CREATE TABLE people (id INTEGER, name TEXT)")
    cxn.executemany("INSERT INTO people (id, name) VALUES (?, ?)", [(1, "Ada"), (2, "Linus"), (3, "Grace"), (4, "Alan"), (5, "Barbara")])
    cxn.commit()
    cxn.close()

    return DatabaseConnectionProvider(
        database_type=DatabaseType.SQLITE,
        host="",
        username="",
        password="",
        database=db_path,
        enable_logging=False,
    )


@pytest.fixture
def opened(sqlite_provider, monkeypatch):
    """Records every connection the provider hands out."""
    connections = []
    acquire = sqlite_provider.acquire

    def recording_acquire():
        cxn = acquire()
        connections.append(cxn)
        return cxn

    monkeypatch.setattr(sqlite_provider, "acquire", recording_acquire)
    return connections


def assert_closed(cxn):
    with pytest.raises(sqlite3.ProgrammingError):
        cxn.execute("SELECT 1")


def test_stream_rows_in_order(sqlite_provider, opened):
    """Testing rows stream in cursor order across several fetch batches, then the owned connection is closed."""
    runner = StreamingQueryRunner(sqlite_provider, DBAPIDriver(DatabaseType.SQLITE, fetch_size=2), enable_logging=False)

    result = runner.execute("SELECT id, name FROM people WHERE id >= ? ORDER BY id", [2])
    assert result.column_names == ["id", "name"]
    assert list(result) == [(2, "Linus"), (3, "Grace"), (4, "Alan"), (5, "Barbara")]

    assert result.closed
    assert_closed(opened[0])


def test_early_close_closes_connection(sqlite_provider, opened):
    """Testing closing a partially read result closes the owned connection."""
    runner = StreamingQueryRunner(sqlite_provider, enable_logging=False)

    with runner.execute("SELECT id, name FROM people ORDER BY id", decoder=dict_decoder) as result:
        assert result.fetchone() == {"id": 1, "name": "Ada"}

    assert_closed(opened[0])


def test_malformed_sql_raises_and_closes_connection(sqlite_provider, opened):
    """Testing malformed SQL raises AcquisitionError, returns nothing, and closes the acquired connection."""
    runner = StreamingQueryRunner(sqlite_provider, enable_logging=False)

    with pytest.raises(AcquisitionError) as info:
        runner.execute("SELEC id FROM people")

    assert info.value.stage == "execute"
    assert isinstance(info.value.__cause__, sqlite3.OperationalError)
    assert len(opened) == 1
    assert_closed(opened[0])


def test_borrowed_connection_stays_open(sqlite_provider):
    """Testing a caller-supplied connection is still usable after the result is exhausted and closed."""
    cxn = sqlite_provider.acquire()
    runner = StreamingQueryRunner(sqlite_provider, enable_logging=False)

    names = runner.execute("SELECT name FROM people ORDER BY id", decoder=ColumnDecoder("name"), connection=cxn)
    assert list(names) == ["Ada", "Linus", "Grace", "Alan", "Barbara"]
    names.close()

    assert sqlite_provider.is_connected(cxn)
    assert cxn.execute("SELECT COUNT(*) FROM people").fetchone() == (5,)
    cxn.close()


def test_closed_borrowed_connection_is_rejected(sqlite_provider):
    """Testing a borrowed connection that is already closed fails at the connect stage."""
    cxn = sqlite_provider.acquire()
    cxn.close()

    with pytest.raises(AcquisitionError) as info:
        StreamingQueryRunner(sqlite_provider, enable_logging=False).execute("SELECT 1", connection=cxn)
    assert info.value.stage == "connect"


def test_empty_result(sqlite_provider, opened):
    """Testing a query with no rows is exhausted immediately and releases on the first pull."""
    runner = StreamingQueryRunner(sqlite_provider, enable_logging=False)

    result = runner.execute("SELECT id FROM people WHERE id > ?", [100])
    assert not result.has_next()
    assert result.fetchall() == []
    assert result.closed
    assert_closed(opened[0])


def test_named_tuple_rows(sqlite_provider):
    """Testing NamedTupleDecoder against real column names."""
    runner = StreamingQueryRunner(sqlite_provider, enable_logging=False)

    with runner.execute("SELECT id, name, COUNT(*) FROM people WHERE id = ?", (3,), NamedTupleDecoder("Person")) as result:
        person = result.fetchone()

    assert person.id == 3
    assert person.name == "Grace"
    assert person._2 == 1


def test_to_df(sqlite_provider, opened):
    """Testing StreamingResult.to_df() drains the remaining rows into a DataFrame with the query's columns."""
    runner = StreamingQueryRunner(sqlite_provider, enable_logging=False)

    result = runner.execute("SELECT id, name FROM people ORDER BY id")
    result.fetchone()
    df = result.to_df()

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["id", "name"]
    assert df.shape == (4, 2)
    assert list(df["name"]) == ["Linus", "Grace", "Alan", "Barbara"]
    assert result.closed


def test_iter_dfs_chunks(sqlite_provider):
    """Testing StreamingResult.iter_dfs() yields bounded chunks until exhausted."""
    runner = StreamingQueryRunner(sqlite_provider, enable_logging=False)

    result = runner.execute("SELECT id, name FROM people ORDER BY id", decoder=dict_decoder)
    chunks = list(result.iter_dfs(2))

    assert [len(c) for c in chunks] == [2, 2, 1]
    assert list(pd.concat(chunks)["id"]) == [1, 2, 3, 4, 5]
    assert result.closed


def test_provider_requires_sqlite_path():
    """Testing a SQLite provider without a database path is rejected."""
    with pytest.raises(ValueError):
        DatabaseConnectionProvider(DatabaseType.SQLITE, "", "", "", enable_logging=False)


def test_reused_decoders_follow_each_query_columns(sqlite_provider):
    """Testing one ColumnDecoder/NamedTupleDecoder instance reused across queries with different column orders."""
    runner = StreamingQueryRunner(sqlite_provider, enable_logging=False)
    by_name = ColumnDecoder("name")
    as_row = NamedTupleDecoder()

    assert runner.execute("SELECT id, name FROM people WHERE id = 1", decoder=by_name).fetchall() == ["Ada"]
    assert runner.execute("SELECT name, id FROM people WHERE id = 1", decoder=by_name).fetchall() == ["Ada"]

    first = runner.execute("SELECT id, name FROM people WHERE id = 2", decoder=as_row).fetchall()[0]
    second = runner.execute("SELECT name FROM people WHERE id = 2", decoder=as_row).fetchall()[0]
    assert (first.id, first.name) == (2, "Linus")
    assert second._fields == ("name",)
    assert second.name == "Linus"
