from contextlib import contextmanager

import pytest

from bloatbench.entities import BenchConfig, TableStats


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn

    def execute(self, sql, params=None):
        self.conn.pending.append((sql, params))

    def executemany(self, sql, params_seq):
        params_seq = list(params_seq)
        if self.conn.pool.fail_on is not None and self.conn.pool.fail_on(sql, params_seq):
            raise RuntimeError("simulated failure")
        for params in params_seq:
            self.conn.pending.append((sql, params))

    def fetchone(self):
        return self.conn.pool.results.pop(0) if self.conn.pool.results else None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeConnection:
    def __init__(self, pool: "FakePool") -> None:
        self.pool = pool
        self.pending: list = []
        self._autocommit = False
        self.autocommit_history: list[bool] = []

    @property
    def autocommit(self) -> bool:
        return self._autocommit

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        self._autocommit = value
        self.autocommit_history.append(value)

    def cursor(self):
        return FakeCursor(self)

    def execute(self, sql, params=None):
        self.pending.append((sql, params))
        self.pool.autocommit_statements.append((sql, self._autocommit))


class FakePool:
    """psycopg_pool.ConnectionPool stand-in: one ``connection()`` block is
    one transaction, committed on clean exit and rolled back on error."""

    def __init__(self) -> None:
        self.results: list = []
        self.committed: list[list] = []
        self.rolled_back: list[list] = []
        self.autocommit_statements: list = []
        self.connections: list[FakeConnection] = []
        self.fail_on = None

    @contextmanager
    def connection(self):
        conn = FakeConnection(self)
        self.connections.append(conn)
        try:
            yield conn
        except BaseException:
            self.rolled_back.append(conn.pending)
            raise
        self.committed.append(conn.pending)

    @property
    def statements(self) -> list:
        return [stmt for block in self.committed for stmt in block]


class FakeDatabase:
    """In-memory table with the DatabaseManager surface and rough MVCC
    bookkeeping: every updated row leaves one dead tuple until vacuum_full."""

    def __init__(self, scan_samples=None) -> None:
        self.rows: dict[int, tuple[str, int]] = {}
        self.dead = 0
        self.vacuums = 0
        self.calls: list[str] = []
        self.transactions: list[list[int]] = []
        self.scan_samples = scan_samples or [0.004, 0.002, 0.003]

    def prepare_schema(self):
        self.calls.append("prepare_schema")

    def insert_rows(self, rows):
        self.calls.append("insert_rows")
        for row_id, data, rnd in rows:
            self.rows[row_id] = (data, rnd)
        return len(rows)

    def update_random_values(self, updates):
        self.calls.append("update")
        self.transactions.append([row_id for _, row_id in updates])
        for rnd, row_id in updates:
            data, _ = self.rows[row_id]
            self.rows[row_id] = (data, rnd)
        self.dead += len(updates)
        return len(updates)

    def count_rows(self):
        self.calls.append("count_rows")
        return len(self.rows)

    def fetch_table_size(self):
        size = 8192 * (1 + (len(self.rows) + self.dead) // 100)
        return f"{size // 1024} kB", size

    def fetch_table_stats(self):
        return TableStats(
            live_tuples=len(self.rows),
            dead_tuples=self.dead,
            vacuum_count=self.vacuums,
            autovacuum_count=0,
        )

    def time_full_scans(self, trials):
        self.calls.append("scan")
        return [self.scan_samples[i % len(self.scan_samples)] for i in range(trials)]

    def vacuum_full(self):
        self.calls.append("vacuum_full")
        self.dead = 0
        self.vacuums += 1


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def small_config() -> BenchConfig:
    return BenchConfig(
        row_count=100,
        payload_size=10,
        transactions_per_round=5,
        rows_per_transaction=10,
        rounds_before_compaction=2,
        rounds_after_compaction=2,
        scan_trials=10,
        settle_seconds=10.0,
        seed=42,
    )
