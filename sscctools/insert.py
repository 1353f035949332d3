"""Bulk-load a file of SSCC codes into MySQL and verify the result."""

from __future__ import annotations

import hashlib
import logging
import os
import re
import sys
import threading
import time
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pymysql

log = logging.getLogger(__name__)

BATCH_SIZE = 200
MAX_WORKERS = 16
RETRY_MAX = 3
INPUT_FILE = "/tmp/sscc.txt"
FAILED_LOG = "failed.log"
DEFAULT_DSN = "user:password@tcp(localhost:3306)/db_name?parseTime=true&timeout=30s"
INSERT_SQL = (
    "INSERT INTO lc_sscc (code,status,createdBy,lastUpdatedBy) "
    "VALUES (%s,100,'txm','txm')"
)

_DSN = re.compile(
    r"(?:(?P<user>[^:@]*)(?::(?P<secret>.*))?@)?"
    r"(?:(?P<net>\w+)(?:\((?P<addr>[^)]*)\))?)?"
    r"/(?P<db>[^?/]*)(?:\?(?P<query>.*))?"
)
_DURATION = re.compile(r"(\d+(?:\.\d*)?)(ns|us|µs|ms|s|m|h)")
_UNITS = {"ns": 1e-9, "us": 1e-6, "µs": 1e-6, "ms": 1e-3, "s": 1, "m": 60, "h": 3600}
_TIMEOUTS = {"timeout": "connect_timeout", "readTimeout": "read_timeout", "writeTimeout": "write_timeout"}


class InsertError(Exception):
    """A batch could not be written to the database."""


def _parse_duration(text: str) -> float:
    parts = _DURATION.findall(text)
    if not parts or "".join(n + u for n, u in parts) != text:
        raise ValueError(f"invalid duration: {text!r}")
    return sum(float(n) * _UNITS[u] for n, u in parts)


def parse_dsn(dsn: str) -> dict[str, Any]:
    """Turn a ``user:pass@net(addr)/dbname?params`` DSN into connect arguments."""
    match = _DSN.fullmatch(dsn)
    if match is None:
        raise ValueError(f"invalid DSN: {dsn!r}")
    options: dict[str, Any] = {"host": "127.0.0.1", "port": 3306}
    if match["user"] is not None:
        password = match["secret"] or ""
        options.update(user=match["user"], password=password)
    net, address = match["net"] or "tcp", match["addr"] or ""
    if net == "unix":
        options = {k: v for k, v in options.items() if k not in ("host", "port")}
        options["unix_socket"] = address
    elif net not in ("tcp", "tcp4", "tcp6"):
        raise ValueError(f"unsupported network type: {net!r}")
    elif address:
        host, sep, port = address.rpartition(":")
        if not sep:
            host, port = address, "3306"
        if not port.isdigit():
            raise ValueError(f"invalid port: {port!r}")
        options.update(host=host.strip("[]") or "127.0.0.1", port=int(port))
    if match["db"]:
        options["database"] = match["db"]
    for pair in filter(None, (match["query"] or "").split("&")):
        key, _, value = pair.partition("=")
        if key in _TIMEOUTS:
            options[_TIMEOUTS[key]] = _parse_duration(value)
        elif key == "charset":
            options["charset"] = value.split(",")[0]
    return options


def connect(dsn: str) -> pymysql.connections.Connection:
    """Open a MySQL connection for ``dsn`` and check that it answers."""
    connection = pymysql.connect(**parse_dsn(dsn))
    connection.ping(reconnect=False)
    return connection


def read_batches(path: str | os.PathLike[str], batch_size: int = BATCH_SIZE) -> Iterator[list[str]]:
    """Yield the lines of ``path`` in lists of at most ``batch_size``."""
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    batch: list[str] = []
    with open(path, encoding="utf-8", newline="") as handle:
        for line in handle:
            batch.append(line.removesuffix("\n").removesuffix("\r"))
            if len(batch) >= batch_size:
                yield batch
                batch = []
    if batch:
        yield batch


def calculate_file_hash(path: str | os.PathLike[str]) -> str:
    """Return the hex SHA-256 digest of the file at ``path``."""
    digest = hashlib.sha256()
    with open(path, "rb") as handle:
        for block in iter(lambda: handle.read(1 << 20), b""):
            digest.update(block)
    return digest.hexdigest()


def count_file_lines(path: str | os.PathLike[str]) -> int:
    """Return the number of lines in ``path``; a final unterminated line counts."""
    with open(path, "rb") as handle:
        return sum(1 for _ in handle)


def save_failed_batch(batch: Iterable[str], path: str | os.PathLike[str] = FAILED_LOG) -> None:
    """Append the codes of a failed batch to ``path``, one per line."""
    try:
        with open(path, "a", encoding="utf-8") as handle:
            handle.writelines(f"{code}\n" for code in batch)
    except OSError as exc:
        log.error("could not write failed batch log: %s", exc)


def insert_batch(connection: Any, batch: Sequence[str]) -> None:
    """Insert all codes of ``batch`` in one transaction, rolling back on error."""
    try:
        connection.begin()
        with connection.cursor() as cursor:
            cursor.executemany(INSERT_SQL, [(code,) for code in batch])
        connection.commit()
    except pymysql.MySQLError as exc:
        try:
            connection.rollback()
        except pymysql.MySQLError:
            pass
        raise InsertError(f"insert failed: {exc}") from exc


class BatchInserter:
    """Insert batches in parallel, retrying each one and logging what fails."""

    def __init__(
        self,
        connect: Callable[[], Any],
        workers: int = MAX_WORKERS,
        retries: int = RETRY_MAX,
        failed_log: str | os.PathLike[str] = FAILED_LOG,
    ) -> None:
        if workers < 1 or retries < 1:
            raise ValueError("workers and retries must be at least 1")
        self.connect = connect
        self.workers = workers
        self.retries = retries
        self.failed_log = failed_log
        self._local = threading.local()
        self._connections: list[Any] = []
        self._lock = threading.Lock()

    def _connection(self) -> Any:
        if getattr(self._local, "connection", None) is None:
            self._local.connection = self.connect()
            with self._lock:
                self._connections.append(self._local.connection)
        return self._local.connection

    def _insert_with_retry(self, batch: list[str]) -> bool:
        for attempt in range(1, self.retries + 1):
            try:
                insert_batch(self._connection(), batch)
                return True
            except (InsertError, pymysql.MySQLError) as exc:
                last_error = exc
                time.sleep(attempt * 0.1)
        log.error("final insert failure: %s", last_error)
        save_failed_batch(batch, self.failed_log)
        return False

    def process(self, batches: Iterable[list[str]]) -> list[list[str]]:
        """Insert every batch and return those that failed all retries."""
        try:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                submitted = [(b, executor.submit(self._insert_with_retry, b)) for b in batches]
                return [batch for batch, future in submitted if not future.result()]
        finally:
            with self._lock:
                connections, self._connections = self._connections, []
            for connection in connections:
                try:
                    connection.close()
                except pymysql.MySQLError:
                    pass
            self._local = threading.local()


def validate_consistency(connection: Any, path: str | os.PathLike[str], original_hash: str) -> bool:
    """Check the file is unchanged and its line count matches the table."""
    try:
        current_hash = calculate_file_hash(path)
        if current_hash != original_hash:
            log.error("file changed: hash %s != %s", original_hash, current_hash)
            return False
        file_lines = count_file_lines(path)
        with connection.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM lc_sscc")
            (db_count,) = cursor.fetchone()
    except (OSError, pymysql.MySQLError) as exc:
        log.error("consistency check failed: %s", exc)
        return False
    if file_lines != db_count:
        log.error("count mismatch: file lines %d != database rows %d", file_lines, db_count)
        return False
    return True


def main(argv: list[str] | None = None) -> int:
    """Load the SSCC file into the database and report whether it is consistent.

    ``argv`` may give the DSN and the input file, in that order.
    """
    argv = list(argv or [])
    dsn = argv[0] if argv else DEFAULT_DSN
    path = argv[1] if len(argv) > 1 else INPUT_FILE
    logging.basicConfig(level=logging.INFO)
    try:
        connection = connect(dsn)
    except (pymysql.MySQLError, ValueError) as exc:
        log.critical("database connection failed: %s", exc)
        return 1
    try:
        original_hash = calculate_file_hash(path)
        BatchInserter(lambda: connect(dsn)).process(read_batches(path))
        if validate_consistency(connection, path, original_hash):
            print("✅ data consistency check passed")
            return 0
        print("❌ data inconsistent, check the error log")
        return 1
    except OSError as exc:
        log.critical("reading file failed: %s", exc)
        return 1
    finally:
        connection.close()


if __name__ == "__main__":
    sys.exit(main())