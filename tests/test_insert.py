import threading
from unittest import mock

import pymysql
import pytest

from sscctools import insert


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def executemany(self, sql, rows):
        self.connection.statements.append(sql)
        for (code,) in rows:
            if code in self.connection.reject:
                raise pymysql.err.IntegrityError(1062, "duplicate entry")
            self.connection.pending.append(code)

    def execute(self, sql, args=None):
        self.connection.statements.append(sql)

    def fetchone(self):
        return (self.connection.count,)


class FakeConnection:
    def __init__(self, table=None, reject=(), count=0, lock=None):
        self.table = table if table is not None else []
        self.reject = set(reject)
        self.count = count
        self.lock = lock or threading.Lock()
        self.pending = []
        self.statements = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def begin(self):
        self.pending = []

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        with self.lock:
            self.table.extend(self.pending)
        self.pending = []
        self.commits += 1

    def rollback(self):
        self.pending = []
        self.rollbacks += 1

    def close(self):
        self.closed = True


def write_lines(path, lines, terminator="\n"):
    path.write_text("".join(f"{line}{terminator}" for line in lines), encoding="utf-8")
    return path


def test_parse_dsn_tcp_with_credentials_and_timeout():
    options = insert.parse_dsn(
        "user:password@tcp(localhost:3306)/db_name?parseTime=true&timeout=30s"
    )
    assert options["user"] == "user"
    assert options["password"] == "password"
    assert options["host"] == "localhost"
    assert options["port"] == 3306
    assert options["database"] == "db_name"
    assert options["connect_timeout"] == 30


def test_parse_dsn_unix_socket():
    options = insert.parse_dsn("user:password@unix(/var/run/mysqld.sock)/db_name")
    assert options["unix_socket"] == "/var/run/mysqld.sock"
    assert "host" not in options


def test_parse_dsn_compound_duration():
    options = insert.parse_dsn("/db_name?readTimeout=1m30s")
    assert options["read_timeout"] == 90


@pytest.mark.parametrize(
    "dsn",
    [
        "no-slash-here",
        "user:password@tcp(localhost:port)/db_name",
        "user:password@tcp(localhost:3306)/db_name?timeout=soon",
        "user:password@udp(localhost:3306)/db_name",
    ],
)
def test_parse_dsn_rejects_invalid(dsn):
    with pytest.raises(ValueError):
        insert.parse_dsn(dsn)


def test_read_batches_splits_and_keeps_order(tmp_path):
    codes = [f"code{n}" for n in range(5)]
    path = write_lines(tmp_path / "codes.txt", codes)
    batches = list(insert.read_batches(path, 2))
    assert batches == [codes[0:2], codes[2:4], codes[4:]]


def test_read_batches_strips_carriage_returns(tmp_path):
    codes = ["alpha", "beta", "gamma"]
    path = write_lines(tmp_path / "codes.txt", codes, terminator="\r\n")
    batches = list(insert.read_batches(path, 10))
    assert batches == [codes]


def test_read_batches_rejects_bad_size(tmp_path):
    path = write_lines(tmp_path / "codes.txt", ["a"])
    with pytest.raises(ValueError):
        list(insert.read_batches(path, 0))


def test_read_batches_missing_file(tmp_path):
    with pytest.raises(OSError):
        list(insert.read_batches(tmp_path / "missing.txt"))


def test_calculate_file_hash_of_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")
    assert insert.calculate_file_hash(path) == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_calculate_file_hash_tracks_content(tmp_path):
    first = write_lines(tmp_path / "a.txt", ["one", "two"])
    same = write_lines(tmp_path / "b.txt", ["one", "two"])
    other = write_lines(tmp_path / "c.txt", ["one", "three"])
    assert insert.calculate_file_hash(first) == insert.calculate_file_hash(same)
    assert insert.calculate_file_hash(first) != insert.calculate_file_hash(other)


@pytest.mark.parametrize("content", ["a\nb\nc\n", "a\nb\nc"])
def test_count_file_lines(tmp_path, content):
    path = tmp_path / "lines.txt"
    path.write_text(content, encoding="utf-8")
    assert insert.count_file_lines(path) == len(content.split())


def test_count_file_lines_empty(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")
    assert insert.count_file_lines(path) == 0


def test_save_failed_batch_appends(tmp_path):
    path = tmp_path / "failed.log"
    insert.save_failed_batch(["a", "b"], path)
    insert.save_failed_batch(["c"], path)
    assert path.read_text(encoding="utf-8").splitlines() == ["a", "b", "c"]


def test_insert_batch_commits_rows():
    connection = FakeConnection()
    insert.insert_batch(connection, ["x1", "x2"])
    assert connection.table == ["x1", "x2"]
    assert connection.commits == 1
    assert connection.statements == [insert.INSERT_SQL]


def test_insert_batch_rolls_back_on_error():
    connection = FakeConnection(reject={"bad"})
    with pytest.raises(insert.InsertError):
        insert.insert_batch(connection, ["ok", "bad"])
    assert connection.table == []
    assert connection.rollbacks == 1
    assert connection.commits == 0


def test_batch_inserter_records_failures(tmp_path):
    table = []
    lock = threading.Lock()
    created = []

    def factory():
        connection = FakeConnection(table=table, reject={"bad"}, lock=lock)
        created.append(connection)
        return connection

    failed_log = tmp_path / "failed.log"
    inserter = insert.BatchInserter(factory, workers=2, retries=3, failed_log=failed_log)
    batches = [["a", "b"], ["c", "bad"], ["d"]]
    with mock.patch("sscctools.insert.time.sleep") as sleep:
        failed = inserter.process(iter(batches))
    assert failed == [["c", "bad"]]
    assert sorted(table) == ["a", "b", "d"]
    assert failed_log.read_text(encoding="utf-8").splitlines() == ["c", "bad"]
    assert sleep.call_count == 3
    assert created and all(connection.closed for connection in created)


def test_batch_inserter_all_succeed(tmp_path):
    table = []
    lock = threading.Lock()
    inserter = insert.BatchInserter(
        lambda: FakeConnection(table=table, lock=lock),
        workers=4,
        retries=2,
        failed_log=tmp_path / "failed.log",
    )
    batches = [[f"c{n}{m}" for m in range(3)] for n in range(6)]
    assert inserter.process(batches) == []
    assert sorted(table) == sorted(code for batch in batches for code in batch)
    assert not (tmp_path / "failed.log").exists()


@pytest.mark.parametrize("workers,retries", [(0, 1), (1, 0)])
def test_batch_inserter_rejects_bad_settings(workers, retries):
    with pytest.raises(ValueError):
        insert.BatchInserter(FakeConnection, workers=workers, retries=retries)


def test_validate_consistency_passes(tmp_path):
    codes = ["a", "b", "c"]
    path = write_lines(tmp_path / "codes.txt", codes)
    connection = FakeConnection(count=len(codes))
    original = insert.calculate_file_hash(path)
    assert insert.validate_consistency(connection, path, original) is True
    assert len(connection.statements) == 1
    statement = " ".join(connection.statements[0].split()).upper()
    assert "SELECT COUNT(*) FROM LC_SSCC" in statement


def test_validate_consistency_detects_changed_file(tmp_path):
    path = write_lines(tmp_path / "codes.txt", ["a", "b"])
    original = insert.calculate_file_hash(path)
    write_lines(path, ["a", "b", "c"])
    connection = FakeConnection(count=3)
    assert insert.validate_consistency(connection, path, original) is False


def test_validate_consistency_detects_count_mismatch(tmp_path):
    codes = ["a", "b"]
    path = write_lines(tmp_path / "codes.txt", codes)
    connection = FakeConnection(count=len(codes) + 1)
    original = insert.calculate_file_hash(path)
    assert insert.validate_consistency(connection, path, original) is False


def test_validate_consistency_missing_file(tmp_path):
    connection = FakeConnection()
    assert insert.validate_consistency(connection, tmp_path / "gone.txt", "") is False