from types import TracebackType
from typing import Any

from bloatbench.entities import BenchConfig, ConnectionParams, Dependencies

POSTGRES_PORT = 5432
POOL_OPEN_TIMEOUT_S = 30.0


class LocalPostgres:
    """Disposable PostgreSQL instance plus a connection pool on top of it.

    With ``config.dsn`` set no container is started and the pool points at
    that server. ``stop()`` is safe to call more than once and always runs
    from ``__exit__``, so the container is removed even when the benchmark
    body raises.
    """

    def __init__(self, config: BenchConfig, deps: Dependencies) -> None:
        self.config = config
        self.deps = deps
        self.container: Any = None
        self.pool: Any = None
        self.params: ConnectionParams | None = None

    def start(self) -> ConnectionParams:
        if self.config.dsn:
            print(f"Using existing server: {self._redacted(self.config.dsn)}")
            self.params = self._params_from_dsn(self.config.dsn)
        else:
            print(f"Starting container {self.config.image} ...")
            self.container = self.deps.postgres_container_cls(image=self.config.image)
            self.container.start()
            self.params = self._params_from_container(self.container)
            print(f"Container ready at {self.params.host}:{self.params.port}")

        self.pool = self.deps.connection_pool_cls(
            self.params.conninfo,
            min_size=1,
            max_size=self.config.pool_max_size,
            open=False,
        )
        self.pool.open(wait=True, timeout=POOL_OPEN_TIMEOUT_S)
        return self.params

    def stop(self) -> None:
        pool, self.pool = self.pool, None
        container, self.container = self.container, None
        try:
            if pool is not None:
                pool.close()
        finally:
            if container is not None:
                print(f"Stopping container {self.config.image} ...")
                container.stop()

    def _params_from_container(self, container: Any) -> ConnectionParams:
        host = container.get_container_host_ip()
        port = int(container.get_exposed_port(POSTGRES_PORT))
        conninfo = self.deps.psycopg.conninfo.make_conninfo(
            host=host,
            port=port,
            user=container.username,
            password=container.password,
            dbname=container.dbname,
        )
        return ConnectionParams(
            host=host,
            port=port,
            user=container.username,
            password=container.password,
            dbname=container.dbname,
            conninfo=conninfo,
        )

    def _params_from_dsn(self, dsn: str) -> ConnectionParams:
        parts = self.deps.psycopg.conninfo.conninfo_to_dict(dsn)
        return ConnectionParams(
            host=str(parts.get("host", "")),
            port=int(parts.get("port") or POSTGRES_PORT),
            user=str(parts.get("user", "")),
            password=str(parts.get("password", "")),
            dbname=str(parts.get("dbname", "")),
            conninfo=dsn,
        )

    def _redacted(self, dsn: str) -> str:
        parts = self.deps.psycopg.conninfo.conninfo_to_dict(dsn)
        if "password" in parts:
            parts["password"] = "***"
        return self.deps.psycopg.conninfo.make_conninfo(**parts)

    def __enter__(self) -> "LocalPostgres":
        try:
            self.start()
        except BaseException:
            self.stop()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
