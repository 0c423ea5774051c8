"""
Process-scoped database service.

``Database`` composes the pool manager, the query executor and the
transaction coordinator. Construct one at process start, call
``initialize`` once, pass it to whatever publishes it to the host, and call
``shutdown`` when the process stops.
"""

from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Sequence, TypeVar

from psycopg_pool import AsyncConnectionPool

from ..models import DatabaseConfig, PoolInfo
from .connection import ConnectionPoolManager
from .executor import QueryExecutor
from .transaction import TransactionConnection, TransactionCoordinator

T = TypeVar("T")


class Database:
    """Connection pool, executor and transactions for one database target."""

    def __init__(
        self,
        pool_factory: Callable[..., AsyncConnectionPool] = AsyncConnectionPool,
        strict_params: bool = False,
    ):
        self.pool = ConnectionPoolManager(pool_factory)
        self.executor = QueryExecutor(self.pool, strict_params=strict_params)
        self.transactions = TransactionCoordinator(self.pool, strict_params=strict_params)

    async def initialize(self, config: DatabaseConfig) -> bool:
        return await self.pool.initialize(config)

    def is_ready(self) -> bool:
        return self.pool.is_ready()

    def pool_info(self) -> Optional[PoolInfo]:
        return self.pool.pool_info()

    async def shutdown(self) -> None:
        await self.pool.shutdown()

    async def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[dict]:
        return await self.executor.query_all(sql, params)

    async def single(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Optional[dict]:
        return await self.executor.query_one(sql, params)

    async def scalar(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.executor.query_scalar(sql, params)

    async def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        return await self.executor.execute(sql, params)

    async def update(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> int:
        return await self.executor.update(sql, params)

    async def insert(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.executor.insert(sql, params)

    async def insert_batch(self, table: str, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> int:
        return await self.executor.batch_insert(table, columns, rows)

    async def raw_query(self, sql: str, values: Optional[Sequence[Any]] = None) -> List[dict]:
        return await self.executor.raw_query(sql, values)

    async def prepare(self, name: str, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[dict]:
        return await self.executor.prepared_query(name, sql, params)

    async def table_exists(self, table_name: str) -> bool:
        return await self.executor.table_exists(table_name)

    async def transaction(self, unit_of_work: Callable[[TransactionConnection], Awaitable[T]]) -> T:
        return await self.transactions.run(unit_of_work)
