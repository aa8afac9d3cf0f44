"""Tests for request-scoped context and the logging filter"""

import asyncio
import logging

import pytest

from src.shared.context import get_request_context, set_current_user
from src.shared.telemetry.logging import RequestContextFilter


def make_record() -> logging.LogRecord:
    return logging.LogRecord("workboard", logging.INFO, __file__, 1, "hello", None, None)


@pytest.mark.asyncio
async def test_context_is_isolated_per_task():
    async def handle(user_id: int, company_id: int):
        set_current_user(user_id, company_id=company_id)
        await asyncio.sleep(0)
        return get_request_context()

    first, second = await asyncio.gather(
        asyncio.create_task(handle(4, 7)), asyncio.create_task(handle(7, 9))
    )

    assert (first.user_id, first.company_id) == (4, 7)
    assert (second.user_id, second.company_id) == (7, 9)


@pytest.mark.asyncio
async def test_filter_stamps_current_user():
    async def log_inside_request():
        set_current_user(4, company_id=7)
        record = make_record()
        RequestContextFilter().filter(record)
        return record

    record = await asyncio.create_task(log_inside_request())

    assert record.user_id == 4
    assert record.company_id == 7


def test_filter_without_user():
    record = make_record()

    assert RequestContextFilter().filter(record) is True
    assert record.user_id == "-"
