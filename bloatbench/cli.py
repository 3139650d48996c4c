import argparse
import os
import re
from typing import Sequence

from dotenv import load_dotenv

from bloatbench.entities import BenchConfig


load_dotenv()

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class CLI:
    @staticmethod
    def parse_config(argv: Sequence[str] | None = None) -> BenchConfig:
        defaults = BenchConfig()
        parser = argparse.ArgumentParser(
            description=(
                "PostgreSQL bloat benchmark: churn a table with batch updates, "
                "watch size, dead tuples and full-scan latency, then VACUUM FULL "
                "halfway and compare."
            )
        )
        parser.add_argument(
            "--rows",
            type=int,
            default=defaults.row_count,
            help="Number of rows loaded into the table.",
        )
        parser.add_argument(
            "--payload-size",
            type=int,
            default=defaults.payload_size,
            help="Length of the random text payload per row.",
        )
        parser.add_argument(
            "--transactions",
            type=int,
            default=defaults.transactions_per_round,
            help="Update transactions per round.",
        )
        parser.add_argument(
            "--rows-per-transaction",
            type=int,
            default=defaults.rows_per_transaction,
            help="Distinct rows updated by each transaction.",
        )
        parser.add_argument(
            "--rounds-before",
            type=int,
            default=defaults.rounds_before_compaction,
            help="Update rounds before VACUUM FULL.",
        )
        parser.add_argument(
            "--rounds-after",
            type=int,
            default=defaults.rounds_after_compaction,
            help="Update rounds after VACUUM FULL.",
        )
        parser.add_argument(
            "--scan-trials",
            type=int,
            default=defaults.scan_trials,
            help="Full-scan repetitions per report (minimum is printed).",
        )
        parser.add_argument(
            "--settle-seconds",
            type=float,
            default=defaults.settle_seconds,
            help="Pause after VACUUM FULL before the next round.",
        )
        parser.add_argument(
            "--image",
            default=os.getenv("BLOAT_PG_IMAGE", defaults.image),
            help="PostgreSQL container image (or set BLOAT_PG_IMAGE env variable).",
        )
        parser.add_argument(
            "--dsn",
            default=os.getenv("PG_DSN"),
            help="Use an existing PostgreSQL server instead of a container (or set PG_DSN).",
        )
        parser.add_argument(
            "--table",
            default=defaults.table,
            help="Target table name.",
        )
        parser.add_argument(
            "--seed",
            type=int,
            default=None,
            help="Seed for identifiers, payloads and update samples.",
        )
        parser.add_argument(
            "--disable-autovacuum",
            action="store_true",
            help="Create the table WITH (autovacuum_enabled = false).",
        )
        parser.add_argument(
            "--report-after-compaction",
            action="store_true",
            help="Print stats right after VACUUM FULL as well.",
        )
        parser.add_argument(
            "--pool-size",
            type=int,
            default=defaults.pool_max_size,
            help="Maximum connections held by the pool.",
        )
        parser.add_argument(
            "--results-csv",
            default=None,
            help="Write every stats snapshot to this CSV file.",
        )
        parser.add_argument(
            "--report-md",
            default=None,
            help="Write a markdown report to this file.",
        )
        parser.add_argument(
            "--no-color",
            action="store_true",
            help="Do not highlight scan latency with ANSI colors.",
        )
        args = parser.parse_args(argv)
        CLI._validate(parser, args)
        return BenchConfig(
            row_count=args.rows,
            payload_size=args.payload_size,
            transactions_per_round=args.transactions,
            rows_per_transaction=args.rows_per_transaction,
            rounds_before_compaction=args.rounds_before,
            rounds_after_compaction=args.rounds_after,
            scan_trials=args.scan_trials,
            settle_seconds=args.settle_seconds,
            image=args.image,
            table=args.table,
            dsn=args.dsn or None,
            seed=args.seed,
            autovacuum_enabled=not args.disable_autovacuum,
            report_after_compaction=args.report_after_compaction,
            pool_max_size=args.pool_size,
            results_csv=args.results_csv,
            report_md=args.report_md,
            color=not args.no_color,
        )

    @staticmethod
    def _validate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
        if not IDENTIFIER_RE.match(args.table):
            parser.error("Invalid table name. Use [A-Za-z_][A-Za-z0-9_]*.")
        if args.rows < 1:
            parser.error("--rows must be > 0.")
        if args.payload_size < 1:
            parser.error("--payload-size must be > 0.")
        if args.transactions < 1:
            parser.error("--transactions must be > 0.")
        if args.rows_per_transaction < 1:
            parser.error("--rows-per-transaction must be > 0.")
        if args.rows_per_transaction > args.rows:
            parser.error("--rows-per-transaction must be <= --rows.")
        if args.rounds_before < 0:
            parser.error("--rounds-before must be >= 0.")
        if args.rounds_after < 0:
            parser.error("--rounds-after must be >= 0.")
        if args.scan_trials < 1:
            parser.error("--scan-trials must be > 0.")
        if args.settle_seconds < 0:
            parser.error("--settle-seconds must be >= 0.")
        if args.pool_size < 1:
            parser.error("--pool-size must be > 0.")
        if not args.image:
            parser.error("--image cannot be empty.")
