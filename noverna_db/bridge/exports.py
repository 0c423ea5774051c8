"""
Database exports for the scripting host.

Every export catches all failures raised by the core, logs them and
returns a sentinel (None, 0 or False) so that a failing query never takes
the host down. The core underneath keeps raising normally.
"""

import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

from ..constants import RESOURCE_NAME
from ..database import Database, TransactionConnection
from ..models import DatabaseConfig
from .registry import ExportRegistry

logger = logging.getLogger(__name__)


def sentinel_on_error(label: str, sentinel: Any):
    """
    Decorator turning any exception from an async export into a sentinel.

    Args:
        label: Export name used in the log line
        sentinel: Value returned when the wrapped call raises
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Export {label} error: {e}")
                return sentinel
        return wrapper
    return decorator


class DatabaseExports:
    """
    Publishes a Database to the host.

    Args:
        database: Process-scoped database service
        config: Configuration used by start()
        resource_name: Name the host uses for this resource in lifecycle events
    """

    def __init__(
        self,
        database: Database,
        config: Optional[DatabaseConfig] = None,
        resource_name: str = RESOURCE_NAME,
    ):
        self.database = database
        self.config = config
        self.resource_name = resource_name

    async def start(self) -> bool:
        """Initialize the database; failure is logged and reported as False."""
        if self.config is None:
            logger.error("No database configuration supplied, cannot initialize")
            return False

        success = await self.database.initialize(self.config)
        if not success:
            logger.error("Failed to initialize database. Please check your configuration.")
        return success

    async def on_resource_stop(self, resource_name: str) -> None:
        """Host lifecycle hook: close the pool when this resource stops."""
        if resource_name == self.resource_name:
            await self.database.shutdown()

    @sentinel_on_error("query", None)
    async def query(self, sql: str, params: Optional[Mapping[str, Any]] = None):
        return await self.database.query(sql, params)

    @sentinel_on_error("single", None)
    async def single(self, sql: str, params: Optional[Mapping[str, Any]] = None):
        return await self.database.single(sql, params)

    @sentinel_on_error("scalar", None)
    async def scalar(self, sql: str, params: Optional[Mapping[str, Any]] = None):
        return await self.database.scalar(sql, params)

    @sentinel_on_error("execute", 0)
    async def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None):
        return await self.database.execute(sql, params)

    @sentinel_on_error("insert", None)
    async def insert(self, sql: str, params: Optional[Mapping[str, Any]] = None):
        return await self.database.insert(sql, params)

    @sentinel_on_error("update", 0)
    async def update(self, sql: str, params: Optional[Mapping[str, Any]] = None):
        return await self.database.update(sql, params)

    @sentinel_on_error("transaction", None)
    async def transaction(self, unit_of_work: Callable[[TransactionConnection], Awaitable[Any]]):
        return await self.database.transaction(unit_of_work)

    @sentinel_on_error("insertBatch", 0)
    async def insert_batch(self, table: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]):
        return await self.database.insert_batch(table, columns, rows)

    @sentinel_on_error("rawQuery", None)
    async def raw_query(self, sql: str, values: Optional[Sequence[Any]] = None):
        return await self.database.raw_query(sql, values)

    @sentinel_on_error("prepare", None)
    async def prepare(self, name: str, sql: str, params: Optional[Mapping[str, Any]] = None):
        return await self.database.prepare(name, sql, params)

    @sentinel_on_error("tableExists", False)
    async def table_exists(self, table_name: str):
        return await self.database.table_exists(table_name)

    def is_ready(self) -> bool:
        return self.database.is_ready()

    def get_pool_info(self) -> Optional[dict]:
        info = self.database.pool_info()
        return dict(info._asdict()) if info is not None else None

    def register(self, registry: ExportRegistry) -> ExportRegistry:
        """Publish every export under the name the host calls it by."""
        registry.register("query", self.query)
        registry.register("single", self.single)
        registry.register("scalar", self.scalar)
        registry.register("execute", self.execute)
        registry.register("insert", self.insert)
        registry.register("update", self.update)
        registry.register("transaction", self.transaction)
        registry.register("insertBatch", self.insert_batch)
        registry.register("rawQuery", self.raw_query)
        registry.register("prepare", self.prepare)
        registry.register("tableExists", self.table_exists)
        registry.register("isReady", self.is_ready)
        registry.register("getPoolInfo", self.get_pool_info)
        return registry
