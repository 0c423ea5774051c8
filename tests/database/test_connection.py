#!/usr/bin/env python3
"""
Tests for the connection pool manager: initialization and verification,
readiness gating, acquisition timeouts, release and shutdown.
"""

import asyncio
import unittest

import psycopg
from psycopg import AsyncRawCursor
from psycopg.rows import dict_row

from noverna_db.database import ConnectionPoolManager, Database, create_database_config
from noverna_db.errors import AcquisitionTimeoutError, NotReadyError
from noverna_db.models import PoolInfo
from tests.helpers.fake_pool import FakePoolFactory


class TestPoolInitialization(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.factory = FakePoolFactory()
        self.manager = ConnectionPoolManager(pool_factory=self.factory)
        self.config = create_database_config(password="pw")

    async def asyncTearDown(self):
        await self.manager.shutdown()

    async def test_initialize_configures_pool(self):
        self.assertTrue(await self.manager.initialize(self.config))

        pool = self.factory.pool
        self.assertIn("dbname=noverna", pool.conninfo)
        self.assertEqual(pool.kwargs["min_size"], 1)
        self.assertEqual(pool.kwargs["max_size"], 20)
        self.assertEqual(pool.kwargs["timeout"], 2.0)
        self.assertEqual(pool.kwargs["max_idle"], 30.0)
        self.assertFalse(pool.kwargs["open"])
        connection_kwargs = pool.kwargs["kwargs"]
        self.assertTrue(connection_kwargs["autocommit"])
        self.assertIs(connection_kwargs["row_factory"], dict_row)
        self.assertIs(connection_kwargs["cursor_factory"], AsyncRawCursor)

    async def test_initialize_verifies_with_round_trip(self):
        await self.manager.initialize(self.config)

        pool = self.factory.pool
        self.assertTrue(pool.opened)
        self.assertEqual(pool.connections[0].statements, ["SELECT NOW()"])
        self.assertEqual(pool.get_count, 1)
        self.assertEqual(pool.put_count, 1)
        self.assertTrue(self.manager.is_ready())

    async def test_open_failure_reports_false(self):
        factory = FakePoolFactory(fail_open=psycopg.OperationalError("connection refused"))
        manager = ConnectionPoolManager(pool_factory=factory)

        with self.assertLogs("noverna_db.database.connection", level="ERROR") as logs:
            result = await manager.initialize(self.config)

        self.assertFalse(result)
        self.assertFalse(manager.is_ready())
        self.assertTrue(factory.pool.closed)
        self.assertIsNone(manager.pool_info())
        self.assertTrue(any("connection refused" in line for line in logs.output))

    async def test_verification_failure_reports_false(self):
        self.factory.server.respond("SELECT NOW()", psycopg.OperationalError("server closed the connection"))

        result = await self.manager.initialize(self.config)

        self.assertFalse(result)
        self.assertFalse(self.manager.is_ready())
        pool = self.factory.pool
        self.assertTrue(pool.closed)
        self.assertEqual(pool.put_count, pool.get_count)

    async def test_factory_failure_reports_false(self):
        def broken_factory(conninfo, **kwargs):
            raise ValueError("bad conninfo")

        manager = ConnectionPoolManager(pool_factory=broken_factory)

        self.assertFalse(await manager.initialize(self.config))
        self.assertFalse(manager.is_ready())

    async def test_initialize_logs_masked_credentials(self):
        config = create_database_config(password="s3cret-value")

        with self.assertLogs("noverna_db.database.connection", level="INFO") as logs:
            await self.manager.initialize(config)

        creating = [line for line in logs.output if "Creating database connection pool" in line]
        self.assertEqual(len(creating), 1)
        self.assertIn("'password': '***'", creating[0])
        self.assertIn("'max_connections': 20", creating[0])
        self.assertNotIn("s3cret-value", "\n".join(logs.output))

    async def test_repeated_initialize_keeps_first_pool(self):
        await self.manager.initialize(self.config)

        self.assertTrue(await self.manager.initialize(self.config))
        self.assertEqual(len(self.factory.pools), 1)


class TestPoolUsage(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.factory = FakePoolFactory()
        self.manager = ConnectionPoolManager(pool_factory=self.factory)
        self.config = create_database_config(max_connections=1, connection_timeout_ms=50)
        await self.manager.initialize(self.config)

    async def asyncTearDown(self):
        await self.manager.shutdown()

    async def test_acquire_before_initialize_raises_without_pool_access(self):
        factory = FakePoolFactory()
        manager = ConnectionPoolManager(pool_factory=factory)

        with self.assertRaises(NotReadyError):
            await manager.acquire()
        self.assertEqual(factory.pools, [])

    async def test_acquire_times_out_when_exhausted(self):
        held = await self.manager.acquire()
        try:
            with self.assertRaises(AcquisitionTimeoutError):
                await self.manager.acquire()
        finally:
            await self.manager.release(held)

        # The pool recovers once the connection is back
        again = await self.manager.acquire()
        await self.manager.release(again)

    async def test_acquire_reuses_released_connection(self):
        first = await self.manager.acquire()
        await self.manager.release(first)
        second = await self.manager.acquire()
        await self.manager.release(second)

        self.assertIs(first, second)
        self.assertEqual(len(self.factory.pool.connections), 1)

    async def test_scoped_connection_released_on_error(self):
        pool = self.factory.pool

        with self.assertRaises(RuntimeError):
            async with self.manager.connection():
                raise RuntimeError("boom")

        self.assertEqual(pool.get_count, pool.put_count)
        self.assertEqual(self.manager.pool_info(), PoolInfo(total=1, idle=1, waiting=0))

    async def test_pool_info_tracks_usage(self):
        self.assertEqual(self.manager.pool_info(), PoolInfo(total=1, idle=1, waiting=0))

        async with self.manager.connection():
            self.assertEqual(self.manager.pool_info(), PoolInfo(total=1, idle=0, waiting=0))

    async def test_shutdown_is_idempotent(self):
        pool = self.factory.pool

        await self.manager.shutdown()
        await self.manager.shutdown()

        self.assertTrue(pool.closed)
        self.assertFalse(self.manager.is_ready())
        self.assertIsNone(self.manager.pool_info())
        with self.assertRaises(NotReadyError):
            await self.manager.acquire()

    async def test_release_after_shutdown_closes_connection(self):
        held = await self.manager.acquire()
        await self.manager.shutdown()

        await self.manager.release(held)

        self.assertTrue(held.closed)

    async def test_release_none_is_ignored(self):
        await self.manager.release(None)
        self.assertEqual(self.factory.pool.put_count, 1)


class TestLoopBinding(unittest.TestCase):
    """The manager is built before the event loop that later drives it."""

    def test_initialize_and_shutdown_race_on_a_later_loop(self):
        factory = FakePoolFactory(open_delay=0.05)
        database = Database(pool_factory=factory)

        async def initialize_then_stop():
            starting = asyncio.ensure_future(database.initialize(create_database_config()))
            # Let initialize take the lock and block in open()
            await asyncio.sleep(0)
            await database.shutdown()
            return await starting

        self.assertTrue(asyncio.run(initialize_then_stop()))

        self.assertFalse(database.is_ready())
        self.assertEqual(len(factory.pools), 1)
        self.assertTrue(factory.pool.closed)

    def test_reused_across_sequential_loops(self):
        factory = FakePoolFactory()
        database = Database(pool_factory=factory)

        self.assertTrue(asyncio.run(database.initialize(create_database_config())))
        asyncio.run(database.shutdown())

        self.assertFalse(database.is_ready())
        self.assertTrue(factory.pool.closed)


if __name__ == "__main__":
    unittest.main()
