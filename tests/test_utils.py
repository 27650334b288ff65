"""
Tests for the retry decorator, cancellation token and logging setup.
"""
import json
import logging
import threading
from unittest.mock import AsyncMock, patch

import pytest

from admxgen.utils.cancellation import CancellationToken, OperationCancelledError, ensure_token
from admxgen.utils.logging import setup_logging
from admxgen.utils.retry import async_retry


class TestAsyncRetry:
    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        calls = []

        @async_retry(retries=2, delay=0.01, catch_exceptions=ConnectionError)
        async def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("down")
            return "ok"

        with patch("admxgen.utils.retry.asyncio.sleep", AsyncMock()) as sleep:
            assert await flaky() == "ok"
        assert len(calls) == 3
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_per_call_override(self):
        attempts = AsyncMock(side_effect=ConnectionError("down"))

        @async_retry(retries=5, catch_exceptions=ConnectionError)
        async def always_down():
            await attempts()

        with pytest.raises(ConnectionError):
            await always_down(retries=0)
        assert attempts.await_count == 1

    @pytest.mark.asyncio
    async def test_other_exceptions_are_not_retried(self):
        attempts = AsyncMock(side_effect=ValueError("bad"))

        @async_retry(retries=3, catch_exceptions=ConnectionError)
        async def broken():
            await attempts()

        with pytest.raises(ValueError):
            await broken()
        assert attempts.await_count == 1


class TestCancellationToken:
    def test_cancel(self):
        token = CancellationToken()
        token.raise_if_cancelled()
        token.cancel()
        assert token.cancelled
        with pytest.raises(OperationCancelledError):
            token.raise_if_cancelled()

    def test_cancel_from_another_thread(self):
        token = CancellationToken()
        worker = threading.Thread(target=token.cancel)
        worker.start()
        worker.join()
        assert token.cancelled

    def test_ensure_token(self):
        token = CancellationToken()
        assert ensure_token(token) is token
        assert not ensure_token(None).cancelled


class TestSetupLogging:
    def test_json_format(self, monkeypatch, capsys):
        monkeypatch.setenv("ADMXGEN_LOG_FORMAT", "json")
        logger = logging.getLogger("admxgen.test.json")
        logger.propagate = False
        setup_logging(force=True, level=logging.INFO, logger=logger)

        logger.info("Compiling %s", "A")

        record = json.loads(capsys.readouterr().err.strip())
        assert record["message"] == "Compiling A"
        assert record["level"] == "INFO"
        assert record["logger"] == "admxgen.test.json"

    def test_existing_handler_is_kept(self):
        logger = logging.getLogger("admxgen.test.keep")
        handler = logging.NullHandler()
        logger.addHandler(handler)
        try:
            setup_logging(logger=logger)
            assert logger.handlers == [handler]
        finally:
            logger.removeHandler(handler)
