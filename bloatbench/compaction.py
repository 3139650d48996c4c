import time
from typing import Callable

from bloatbench.db import DatabaseManager
from bloatbench.entities import BenchConfig


class CompactionTrigger:
    def __init__(
        self,
        config: BenchConfig,
        db: DatabaseManager,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.config = config
        self.db = db
        self.sleep = sleep or time.sleep

    def compact(self) -> float:
        """VACUUM FULL the table, then wait for the statistics to settle.

        Holds an ACCESS EXCLUSIVE lock on the table while it runs. Returns the
        time spent in the VACUUM itself, excluding the settle pause.
        """
        print("*** VACUUM ***")
        started = time.perf_counter()
        self.db.vacuum_full()
        elapsed = time.perf_counter() - started
        print(f"VACUUM FULL ANALYZE done in {elapsed:.2f}s")
        if self.config.settle_seconds > 0:
            self.sleep(self.config.settle_seconds)
        return elapsed
