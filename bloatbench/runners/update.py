import time

from bloatbench.data_generator import RowGenerator
from bloatbench.db import DatabaseManager
from bloatbench.entities import BenchConfig, RoundResult


class UpdateDriver:
    """Runs one update round: ``transactions_per_round`` independent
    transactions, each rewriting ``rnd`` on a fresh sample of
    ``rows_per_transaction`` distinct identifiers.

    Transactions commit one by one; an error aborts the round but leaves the
    earlier transactions committed.
    """

    def __init__(
        self,
        config: BenchConfig,
        db: DatabaseManager,
        generator: RowGenerator,
    ) -> None:
        self.config = config
        self.db = db
        self.generator = generator

    def run_round(self, ids: list[int]) -> RoundResult:
        started = time.perf_counter()
        rows_updated = 0
        for _ in range(self.config.transactions_per_round):
            updates = self.generator.sample_updates(ids, self.config.rows_per_transaction)
            rows_updated += self.db.update_random_values(updates)
        return RoundResult(
            transactions=self.config.transactions_per_round,
            rows_updated=rows_updated,
            elapsed_s=time.perf_counter() - started,
        )
