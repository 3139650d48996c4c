from typing import Callable

from bloatbench.compaction import CompactionTrigger
from bloatbench.data_generator import RowGenerator
from bloatbench.db import DatabaseManager
from bloatbench.entities import (
    PHASE_AFTER,
    PHASE_BEFORE,
    PHASE_COMPACTED,
    PHASE_LOAD,
    BenchConfig,
    StatsSnapshot,
)
from bloatbench.runners.loader import DataLoader
from bloatbench.runners.update import UpdateDriver
from bloatbench.stats import StatsReporter


class BloatBenchmarkRunner:
    def __init__(
        self,
        config: BenchConfig,
        db: DatabaseManager,
        generator: RowGenerator,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.config = config
        self.generator = generator
        self.loader = DataLoader(config, db, generator)
        self.driver = UpdateDriver(config, db, generator)
        self.stats = StatsReporter(config, db)
        self.compactor = CompactionTrigger(config, db, sleep=sleep)

    def run(self) -> list[StatsSnapshot]:
        snapshots: list[StatsSnapshot] = []

        ids = self.generator.generate_ids(self.config.row_count)
        self.loader.load(ids)
        snapshots.append(self.stats.report(PHASE_LOAD))

        snapshots.extend(
            self._run_rounds(ids, PHASE_BEFORE, self.config.rounds_before_compaction)
        )

        self.compactor.compact()
        if self.config.report_after_compaction:
            snapshots.append(self.stats.report(PHASE_COMPACTED))

        snapshots.extend(
            self._run_rounds(ids, PHASE_AFTER, self.config.rounds_after_compaction)
        )
        return snapshots

    def _run_rounds(self, ids: list[int], phase: str, rounds: int) -> list[StatsSnapshot]:
        snapshots: list[StatsSnapshot] = []
        label = phase.replace("_", " ")
        for index in range(1, rounds + 1):
            result = self.driver.run_round(ids)
            print(
                f"[{label} {index}/{rounds}] "
                f"{result.transactions} trx x {self.config.rows_per_transaction} rows "
                f"in {result.elapsed_s:.2f}s"
            )
            snapshots.append(self.stats.report(phase, index))
        return snapshots
