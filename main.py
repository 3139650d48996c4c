import random

from bloatbench.cli import CLI
from bloatbench.data_generator import RowGenerator
from bloatbench.db import DatabaseManager
from bloatbench.entities import BenchConfig, StatsSnapshot
from bloatbench.provisioner import LocalPostgres
from bloatbench.report import ResultsReporter
from bloatbench.runners.bloat import BloatBenchmarkRunner
from bloatbench.utils import DependencyProvider


class App:
    def __init__(self, config: BenchConfig) -> None:
        self.config = config
        self.deps = DependencyProvider().load()
        self.generator = RowGenerator(random.Random(config.seed))
        self.reporter = ResultsReporter(config)

    def run(self) -> list[StatsSnapshot]:
        self.reporter.print_config()
        with LocalPostgres(self.config, self.deps) as pg:
            db = DatabaseManager(self.config, pg.pool)
            runner = BloatBenchmarkRunner(self.config, db, self.generator)
            snapshots = runner.run()

        self.reporter.print_results_table(snapshots)
        if self.config.results_csv:
            csv_path = self.reporter.save_csv(snapshots, self.config.results_csv)
            print(f"CSV saved: {csv_path}")
        if self.config.report_md:
            report_path = self.reporter.save_report(snapshots, self.config.report_md)
            print(f"Report saved: {report_path}")
        return snapshots


def main() -> None:
    config = CLI.parse_config()
    app = App(config)
    app.run()


if __name__ == "__main__":
    main()
