from dataclasses import dataclass, field
from typing import Any

PHASE_LOAD = "load"
PHASE_BEFORE = "before_compaction"
PHASE_COMPACTED = "compacted"
PHASE_AFTER = "after_compaction"


@dataclass
class BenchConfig:
    row_count: int = 4000
    payload_size: int = 1600
    transactions_per_round: int = 100
    rows_per_transaction: int = 1000
    rounds_before_compaction: int = 10
    rounds_after_compaction: int = 10
    scan_trials: int = 10
    settle_seconds: float = 10.0
    image: str = "postgres:14"
    table: str = "test_table"
    dsn: str | None = None
    seed: int | None = None
    autovacuum_enabled: bool = True
    report_after_compaction: bool = False
    pool_max_size: int = 2
    results_csv: str | None = None
    report_md: str | None = None
    color: bool = True


@dataclass
class Dependencies:
    psycopg: Any
    connection_pool_cls: Any
    postgres_container_cls: Any


@dataclass
class ConnectionParams:
    host: str
    port: int
    user: str
    password: str
    dbname: str
    conninfo: str


@dataclass
class TableStats:
    live_tuples: int = 0
    dead_tuples: int = 0
    vacuum_count: int = 0
    autovacuum_count: int = 0


@dataclass
class ScanTiming:
    samples_s: list[float] = field(default_factory=list)

    @property
    def min_s(self) -> float:
        if not self.samples_s:
            return 0.0
        return min(self.samples_s)

    @property
    def min_ms(self) -> float:
        return self.min_s * 1000.0


@dataclass
class RoundResult:
    transactions: int
    rows_updated: int
    elapsed_s: float


@dataclass
class StatsSnapshot:
    phase: str
    round_no: int
    taken_at: str
    rows_count: int
    table_size: str
    table_size_bytes: int
    stats: TableStats
    scan: ScanTiming

    @property
    def live_tuples(self) -> int:
        return self.stats.live_tuples

    @property
    def dead_tuples(self) -> int:
        return self.stats.dead_tuples

    @property
    def scan_min_ms(self) -> float:
        return self.scan.min_ms
