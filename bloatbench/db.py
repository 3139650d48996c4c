import time
from typing import Any

from bloatbench.entities import BenchConfig, TableStats


class DatabaseManager:
    def __init__(self, config: BenchConfig, pool: Any) -> None:
        self.config = config
        self.pool = pool

    def prepare_schema(self) -> None:
        storage = "" if self.config.autovacuum_enabled else " WITH (autovacuum_enabled = false)"
        create_sql = (
            f"CREATE TABLE IF NOT EXISTS {self.config.table} "
            f"(id BIGINT PRIMARY KEY, data TEXT NOT NULL, rnd BIGINT NOT NULL)"
            f"{storage};"
        )
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                if self.config.dsn:
                    cur.execute(f"DROP TABLE IF EXISTS {self.config.table};")
                cur.execute(create_sql)

    def insert_rows(self, rows: list[tuple[int, str, int]]) -> int:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.executemany(
                    f"INSERT INTO {self.config.table} (id, data, rnd) VALUES (%s, %s, %s);",
                    rows,
                )
        return len(rows)

    def update_random_values(self, updates: list[tuple[int, int]]) -> int:
        # One pooled block is one transaction: committed on exit, rolled back on error.
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.executemany(
                    f"UPDATE {self.config.table} SET rnd = %s WHERE id = %s;",
                    updates,
                )
        return len(updates)

    def count_rows(self) -> int:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT count(*) FROM {self.config.table};")
                row = cur.fetchone()
                if row is None:
                    raise RuntimeError(f"count(*) on {self.config.table} returned no row.")
                return int(row[0])

    def fetch_table_size(self) -> tuple[str, int]:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT pg_size_pretty(pg_total_relation_size(%s::regclass)), "
                    "pg_total_relation_size(%s::regclass);",
                    (self.config.table, self.config.table),
                )
                row = cur.fetchone()
                if row is None:
                    raise RuntimeError(f"Size of {self.config.table} is not available.")
                return str(row[0]), int(row[1])

    def fetch_table_stats(self) -> TableStats:
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT n_live_tup, n_dead_tup, vacuum_count, autovacuum_count "
                    "FROM pg_stat_all_tables WHERE relname = %s;",
                    (self.config.table,),
                )
                row = cur.fetchone()
        # The statistics view lags behind; a freshly created table may have no row yet.
        if row is None:
            return TableStats()
        return TableStats(
            live_tuples=int(row[0] or 0),
            dead_tuples=int(row[1] or 0),
            vacuum_count=int(row[2] or 0),
            autovacuum_count=int(row[3] or 0),
        )

    def time_full_scans(self, trials: int) -> list[float]:
        samples: list[float] = []
        with self.pool.connection() as conn:
            with conn.cursor() as cur:
                for _ in range(trials):
                    started = time.perf_counter()
                    cur.execute(f"SELECT sum(rnd) FROM {self.config.table};")
                    cur.fetchone()
                    samples.append(time.perf_counter() - started)
        return samples

    def vacuum_full(self) -> None:
        with self.pool.connection() as conn:
            conn.autocommit = True
            try:
                conn.execute(f"VACUUM FULL ANALYZE {self.config.table};")
            finally:
                conn.autocommit = False
