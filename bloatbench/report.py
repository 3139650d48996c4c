import csv
from datetime import datetime, UTC

from bloatbench.entities import PHASE_AFTER, PHASE_BEFORE, PHASE_LOAD, BenchConfig, StatsSnapshot
from bloatbench.utils import MetricsUtils


class ResultsReporter:
    def __init__(self, config: BenchConfig) -> None:
        self.config = config

    def print_config(self) -> None:
        print("=== Configuration ===")
        if self.config.dsn:
            print("Server: existing (--dsn)")
        else:
            print(f"Image: {self.config.image}")
        print(f"Table: {self.config.table}")
        print(f"Rows: {self.config.row_count} x {self.config.payload_size} chars")
        print(
            f"Round: {self.config.transactions_per_round} trx x "
            f"{self.config.rows_per_transaction} rows"
        )
        print(
            f"Rounds: {self.config.rounds_before_compaction} before / "
            f"{self.config.rounds_after_compaction} after VACUUM FULL"
        )
        print(f"Scan trials per report: {self.config.scan_trials}")
        print(f"Settle after compaction: {self.config.settle_seconds:g} s")
        print(f"Autovacuum: {'on' if self.config.autovacuum_enabled else 'off'}")
        print(f"Seed: {self.config.seed if self.config.seed is not None else 'random'}")
        if self.config.results_csv:
            print(f"CSV output: {self.config.results_csv}")
        if self.config.report_md:
            print(f"Report output: {self.config.report_md}")
        print()

    def print_results_table(self, snapshots: list[StatsSnapshot]) -> None:
        if not snapshots:
            print("No results to print.")
            return
        print("=== Results Table ===")
        for line in self._table_lines(snapshots):
            print(line)
        print()

    def save_csv(self, snapshots: list[StatsSnapshot], path: str) -> str:
        with open(path, "w", newline="", encoding="utf-8") as file:
            writer = csv.writer(file)
            writer.writerow(
                [
                    "phase",
                    "round",
                    "taken_at",
                    "rows_count",
                    "table_size",
                    "table_size_bytes",
                    "live_tuples",
                    "dead_tuples",
                    "vacuum_count",
                    "autovacuum_count",
                    "scan_min_ms",
                    "scan_samples_ms",
                ]
            )
            for item in snapshots:
                writer.writerow(
                    [
                        item.phase,
                        item.round_no,
                        item.taken_at,
                        item.rows_count,
                        item.table_size,
                        item.table_size_bytes,
                        item.stats.live_tuples,
                        item.stats.dead_tuples,
                        item.stats.vacuum_count,
                        item.stats.autovacuum_count,
                        f"{item.scan_min_ms:.6f}",
                        " ".join(f"{sample * 1000.0:.6f}" for sample in item.scan.samples_s),
                    ]
                )
        return path

    def save_report(self, snapshots: list[StatsSnapshot], path: str) -> str:
        generated_at = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%SZ")
        loaded = next((item for item in snapshots if item.phase == PHASE_LOAD), None)
        before = [item for item in snapshots if item.phase == PHASE_BEFORE]
        after = [item for item in snapshots if item.phase == PHASE_AFTER]

        lines: list[str] = []
        lines.append("# Table Bloat Report")
        lines.append("")
        lines.append(f"Generated at (UTC): {generated_at}")
        lines.append("")
        lines.append("## Configuration")
        lines.append("")
        lines.append(f"- Image: `{self.config.image}`")
        lines.append(f"- Table: `{self.config.table}`")
        lines.append(f"- Rows: `{self.config.row_count}`")
        lines.append(f"- Payload size: `{self.config.payload_size}`")
        lines.append(
            f"- Round: `{self.config.transactions_per_round}` trx x "
            f"`{self.config.rows_per_transaction}` rows"
        )
        lines.append(
            f"- Rounds: `{self.config.rounds_before_compaction}` before / "
            f"`{self.config.rounds_after_compaction}` after VACUUM FULL"
        )
        lines.append("")

        lines.append("## Bloated Vs Compacted")
        lines.append("")
        if loaded is not None:
            lines.append(
                f"- After load: `{MetricsUtils.format_bytes(loaded.table_size_bytes)}`, "
                f"fullscan `{loaded.scan_min_ms:.3f}` ms."
            )
        if before:
            peak = max(before, key=lambda row: row.table_size_bytes)
            best = min(before, key=lambda row: row.scan_min_ms)
            lines.append(
                f"- Before compaction: peak size "
                f"`{MetricsUtils.format_bytes(peak.table_size_bytes)}` (round {peak.round_no}), "
                f"max dead tuples `{max(row.dead_tuples for row in before)}`, "
                f"best fullscan `{best.scan_min_ms:.3f}` ms."
            )
        else:
            lines.append("- Before compaction: no update rounds were run.")
        if after:
            first = after[0]
            best = min(after, key=lambda row: row.scan_min_ms)
            lines.append(
                f"- After compaction: first size "
                f"`{MetricsUtils.format_bytes(first.table_size_bytes)}`, "
                f"final size `{MetricsUtils.format_bytes(after[-1].table_size_bytes)}`, "
                f"best fullscan `{best.scan_min_ms:.3f}` ms."
            )
        else:
            lines.append("- After compaction: no update rounds were run.")
        lines.append("")

        if snapshots:
            lines.append("## All Snapshots")
            lines.append("")
            lines.extend(self._table_lines(snapshots))
            lines.append("")

        with open(path, "w", encoding="utf-8") as file:
            file.write("\n".join(lines))
        return path

    @staticmethod
    def _table_lines(snapshots: list[StatsSnapshot]) -> list[str]:
        lines = [
            "| phase | round | rows | table_size | live | dead | vacuum | autovacuum | scan_min_ms |",
            "|---|---:|---:|---:|---:|---:|---:|---:|---:|",
        ]
        for item in snapshots:
            lines.append(
                f"| {item.phase} | {item.round_no} | {item.rows_count} | "
                f"{item.table_size} | {item.stats.live_tuples} | {item.stats.dead_tuples} | "
                f"{item.stats.vacuum_count} | {item.stats.autovacuum_count} | "
                f"{item.scan_min_ms:.3f} |"
            )
        return lines
