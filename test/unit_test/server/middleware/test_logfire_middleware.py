"""Unit tests for the request tracing middleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from orm_pitfalls.server.middleware import LogfireMiddleware

pytestmark = pytest.mark.asyncio


@pytest.fixture
def traced_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(LogfireMiddleware)

    @app.get("/ok")
    async def ok():
        return {"status": "ok"}

    @app.get("/fail")
    async def fail():
        raise RuntimeError("boom")

    return app


class TestLogfireMiddleware:
    async def test_successful_request_is_recorded(self, traced_app):
        with patch("orm_pitfalls.server.middleware.logfire_middleware.log_api_request") as mock_log:
            async with AsyncClient(transport=ASGITransport(app=traced_app), base_url="http://localhost") as client:
                response = await client.get("/ok")

        assert response.status_code == 200
        assert float(response.headers["X-Process-Time"]) >= 0
        mock_log.assert_called_once()
        kwargs = mock_log.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["path"] == "/ok"
        assert kwargs["status_code"] == 200

    async def test_failed_request_is_recorded_and_reraised(self, traced_app):
        with (
            patch("orm_pitfalls.server.middleware.logfire_middleware.log_api_request") as mock_log,
            patch("orm_pitfalls.server.middleware.logfire_middleware.logger") as mock_logger,
        ):
            async with AsyncClient(transport=ASGITransport(app=traced_app), base_url="http://localhost") as client:
                with pytest.raises(RuntimeError, match="boom"):
                    await client.get("/fail")

        mock_logger.error.assert_called_once()
        assert mock_log.call_args.kwargs["status_code"] == 500

    async def test_slow_request_logs_warning(self, traced_app):
        with (
            patch("orm_pitfalls.server.middleware.logfire_middleware.SLOW_REQUEST_MS", -1),
            patch("orm_pitfalls.server.middleware.logfire_middleware.logger") as mock_logger,
        ):
            async with AsyncClient(transport=ASGITransport(app=traced_app), base_url="http://localhost") as client:
                await client.get("/ok")

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]
