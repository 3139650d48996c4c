from datetime import datetime

from bloatbench.db import DatabaseManager
from bloatbench.entities import BenchConfig, ScanTiming, StatsSnapshot
from bloatbench.utils import MetricsUtils


class StatsReporter:
    def __init__(self, config: BenchConfig, db: DatabaseManager) -> None:
        self.config = config
        self.db = db

    def report(self, phase: str, round_no: int = 0) -> StatsSnapshot:
        taken_at = datetime.now().isoformat()
        print(f"=== {taken_at} ===")

        rows_count = self.db.count_rows()
        table_size, table_size_bytes = self.db.fetch_table_size()
        stats = self.db.fetch_table_stats()
        print(
            f"Stats: rows_cnt: {rows_count}, table_size: {table_size}, "
            f"live tuples: {stats.live_tuples}, dead tuples: {stats.dead_tuples}, "
            f"vacuum_cnt: {stats.vacuum_count}, autovacuum_cnt: {stats.autovacuum_count}"
        )

        scan = ScanTiming(samples_s=self.db.time_full_scans(self.config.scan_trials))
        print(
            "> fullscan ela: "
            f"{MetricsUtils.highlight(f'{scan.min_ms:.3f}', self.config.color)}ms"
        )

        return StatsSnapshot(
            phase=phase,
            round_no=round_no,
            taken_at=taken_at,
            rows_count=rows_count,
            table_size=table_size,
            table_size_bytes=table_size_bytes,
            stats=stats,
            scan=scan,
        )
