"""Integration tests for SnowflakeClient against a real account.

Skipped unless test_config.toml names a profile. The scratch table is created
and dropped through SnowflakeConnector since the client itself runs only
SELECT/INSERT/UPDATE/DELETE.
"""

import asyncio
import uuid
from typing import Iterator

import pytest

from snowclient import ClientOptions, ExecutionError, SnowflakeClient, SnowflakeConnector

pytestmark = pytest.mark.integration


@pytest.fixture
def options(test_profile) -> ClientOptions:
    return ClientOptions.from_profile(test_profile)


@pytest.fixture
def scratch_table(options, test_scratch_table) -> Iterator[str]:
    """Unique scratch table, dropped after the test."""
    table = f"{test_scratch_table}_{uuid.uuid4().hex[:8]}".upper()
    with SnowflakeConnector(options) as conn:
        conn.cursor().execute(
            f"CREATE TABLE {table} (LOAN_ID VARCHAR, SYSTEM VARCHAR, FIRST_NAME VARCHAR, AUTOPAY_AMOUNT FLOAT)"
        )
    yield table
    with SnowflakeConnector(options) as conn:
        conn.cursor().execute(f"DROP TABLE IF EXISTS {table}")


class TestClientRoundTrip:
    """Insert, read, update and delete rows in a scratch table."""

    def test_crud(self, options, scratch_table):
        async def scenario():
            async with SnowflakeClient(options) as client:
                await client.insert(scratch_table, [
                    {"LOAN_ID": "101", "SYSTEM": "test", "FIRST_NAME": "test1"},
                    {"LOAN_ID": "102", "SYSTEM": "test"},
                ])
                inserted = await client.select(f"SELECT * FROM {scratch_table} ORDER BY LOAN_ID")

                await client.update(scratch_table, {"FIRST_NAME": "updated", "AUTOPAY_AMOUNT": 1.2}, "LOAN_ID = '101'")
                updated = await client.select(f"select FIRST_NAME, AUTOPAY_AMOUNT from {scratch_table} where LOAN_ID = '101'")

                await client.delete(scratch_table, "FIRST_NAME = 'updated'")
                remaining = await client.select(f"SELECT LOAN_ID FROM {scratch_table}")
                return inserted, updated, remaining

        inserted, updated, remaining = asyncio.run(scenario())

        assert [row["LOAN_ID"] for row in inserted] == ["101", "102"]
        assert inserted[1]["FIRST_NAME"] is None
        assert updated == [{"FIRST_NAME": "updated", "AUTOPAY_AMOUNT": 1.2}]
        assert remaining == [{"LOAN_ID": "102"}]

    def test_streaming(self, options, scratch_table):
        records = [{"LOAN_ID": str(i), "SYSTEM": "stream"} for i in range(25)]

        async def scenario():
            async with SnowflakeClient(options, stream_batch_size=10) as client:
                await client.insert(scratch_table, records)
                stream = await client.select(
                    f"SELECT LOAN_ID FROM {scratch_table} ORDER BY TO_NUMBER(LOAN_ID)",
                    stream_results=True,
                )
                return [row["LOAN_ID"] async for row in stream]

        assert asyncio.run(scenario()) == [str(i) for i in range(25)]

    def test_select_df(self, options, scratch_table):
        async def scenario():
            async with SnowflakeClient(options) as client:
                await client.insert(scratch_table, [{"LOAN_ID": "1", "SYSTEM": "df"}])
                return await client.select_df(f"SELECT LOAN_ID, SYSTEM FROM {scratch_table}")

        df = asyncio.run(scenario())

        assert list(df.columns) == ["loan_id", "system"]
        assert len(df) == 1

    def test_execution_error(self, options):
        async def scenario():
            async with SnowflakeClient(options) as client:
                await client.select(f"SELECT * FROM NO_SUCH_TABLE_{uuid.uuid4().hex[:8]}")

        with pytest.raises(ExecutionError) as exc_info:
            asyncio.run(scenario())

        assert exc_info.value.original is not None
        assert exc_info.value.query_id
