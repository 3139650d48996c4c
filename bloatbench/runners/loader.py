import time

from bloatbench.data_generator import RowGenerator
from bloatbench.db import DatabaseManager
from bloatbench.entities import BenchConfig


class DataLoader:
    def __init__(
        self,
        config: BenchConfig,
        db: DatabaseManager,
        generator: RowGenerator,
    ) -> None:
        self.config = config
        self.db = db
        self.generator = generator

    def load(self, ids: list[int]) -> int:
        self.db.prepare_schema()
        rows = self.generator.generate_rows(ids, self.config.payload_size)
        started = time.perf_counter()
        inserted = self.db.insert_rows(rows)
        elapsed = time.perf_counter() - started
        print(
            f"[load] {inserted} rows x {self.config.payload_size} chars "
            f"in {elapsed:.2f}s"
        )
        return inserted
