from bloatbench.entities import Dependencies

RED = "\033[31m"
RESET = "\033[0m"


class DependencyProvider:
    def load(self) -> Dependencies:
        try:
            import psycopg
        except ImportError as exc:
            raise SystemExit(
                "psycopg is not installed. Install with: pip install 'psycopg[binary]'"
            ) from exc

        try:
            from psycopg_pool import ConnectionPool
        except ImportError as exc:
            raise SystemExit(
                "psycopg_pool is not installed. Install with: pip install psycopg-pool"
            ) from exc

        try:
            from testcontainers.postgres import PostgresContainer
        except ImportError as exc:
            raise SystemExit(
                "testcontainers is not installed. "
                "Install with: pip install 'testcontainers[postgres]'"
            ) from exc

        return Dependencies(
            psycopg=psycopg,
            connection_pool_cls=ConnectionPool,
            postgres_container_cls=PostgresContainer,
        )


class MetricsUtils:
    @staticmethod
    def format_bytes(raw_bytes: int) -> str:
        value = float(raw_bytes)
        units = ["B", "KB", "MB", "GB", "TB"]
        for unit in units:
            if value < 1024.0:
                return f"{value:.2f} {unit}"
            value /= 1024.0
        return f"{value:.2f} PB"

    @staticmethod
    def highlight(text: str, color: bool = True) -> str:
        if not color:
            return text
        return f"{RED}{text}{RESET}"
