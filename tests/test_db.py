import pytest

from bloatbench.db import DatabaseManager
from bloatbench.entities import BenchConfig, TableStats


def test_prepare_schema_creates_table(fake_pool):
    db = DatabaseManager(BenchConfig(), fake_pool)
    db.prepare_schema()
    [(sql, _)] = fake_pool.statements
    assert sql.startswith("CREATE TABLE IF NOT EXISTS test_table")
    assert "id BIGINT PRIMARY KEY" in sql
    assert "data TEXT" in sql
    assert "rnd BIGINT" in sql
    assert "autovacuum_enabled" not in sql


def test_prepare_schema_without_autovacuum(fake_pool):
    db = DatabaseManager(BenchConfig(autovacuum_enabled=False), fake_pool)
    db.prepare_schema()
    [(sql, _)] = fake_pool.statements
    assert sql.endswith("WITH (autovacuum_enabled = false);")


def test_prepare_schema_recreates_table_on_existing_server(fake_pool):
    db = DatabaseManager(BenchConfig(dsn="dbname=bench"), fake_pool)
    db.prepare_schema()
    sqls = [sql for sql, _ in fake_pool.statements]
    assert sqls[0] == "DROP TABLE IF EXISTS test_table;"
    assert sqls[1].startswith("CREATE TABLE IF NOT EXISTS test_table")


def test_insert_rows_is_one_transaction(fake_pool):
    db = DatabaseManager(BenchConfig(), fake_pool)
    rows = [(1, "aa", 10), (2, "bb", 20), (3, "cc", 30)]
    assert db.insert_rows(rows) == 3
    assert len(fake_pool.committed) == 1
    assert [params for _, params in fake_pool.committed[0]] == rows


def test_failed_insert_commits_nothing(fake_pool):
    fake_pool.fail_on = lambda sql, params: sql.startswith("INSERT")
    db = DatabaseManager(BenchConfig(), fake_pool)
    with pytest.raises(RuntimeError):
        db.insert_rows([(1, "aa", 10)])
    assert fake_pool.committed == []
    assert len(fake_pool.rolled_back) == 1


def test_update_random_values_sql(fake_pool):
    db = DatabaseManager(BenchConfig(table="bloated"), fake_pool)
    assert db.update_random_values([(111, 1), (222, 2)]) == 2
    assert fake_pool.statements == [
        ("UPDATE bloated SET rnd = %s WHERE id = %s;", (111, 1)),
        ("UPDATE bloated SET rnd = %s WHERE id = %s;", (222, 2)),
    ]


def test_count_rows(fake_pool):
    fake_pool.results = [(4000,)]
    db = DatabaseManager(BenchConfig(), fake_pool)
    assert db.count_rows() == 4000


def test_count_rows_without_result_raises(fake_pool):
    db = DatabaseManager(BenchConfig(), fake_pool)
    with pytest.raises(RuntimeError):
        db.count_rows()


def test_fetch_table_size(fake_pool):
    fake_pool.results = [("7256 kB", 7430144)]
    db = DatabaseManager(BenchConfig(), fake_pool)
    assert db.fetch_table_size() == ("7256 kB", 7430144)
    [(sql, params)] = fake_pool.statements
    assert "pg_size_pretty(pg_total_relation_size(" in sql
    assert params == ("test_table", "test_table")


def test_fetch_table_stats(fake_pool):
    fake_pool.results = [(4000, 1234, 1, 2)]
    db = DatabaseManager(BenchConfig(), fake_pool)
    assert db.fetch_table_stats() == TableStats(4000, 1234, 1, 2)
    [(sql, params)] = fake_pool.statements
    assert "pg_stat_all_tables" in sql
    assert params == ("test_table",)


def test_fetch_table_stats_tolerates_missing_row(fake_pool):
    db = DatabaseManager(BenchConfig(), fake_pool)
    assert db.fetch_table_stats() == TableStats()


def test_fetch_table_stats_tolerates_null_counters(fake_pool):
    fake_pool.results = [(None, None, None, None)]
    db = DatabaseManager(BenchConfig(), fake_pool)
    assert db.fetch_table_stats() == TableStats()


def test_time_full_scans_uses_one_connection(fake_pool):
    fake_pool.results = [(1,)] * 10
    db = DatabaseManager(BenchConfig(), fake_pool)
    samples = db.time_full_scans(10)
    assert len(samples) == 10
    assert all(sample >= 0 for sample in samples)
    assert len(fake_pool.connections) == 1
    assert [sql for sql, _ in fake_pool.statements] == ["SELECT sum(rnd) FROM test_table;"] * 10


def test_vacuum_full_runs_in_autocommit(fake_pool):
    db = DatabaseManager(BenchConfig(), fake_pool)
    db.vacuum_full()
    assert fake_pool.autocommit_statements == [("VACUUM FULL ANALYZE test_table;", True)]
    [conn] = fake_pool.connections
    assert conn.autocommit_history == [True, False]
