"""
Unit tests for FastAPI application lifespan management.

Tests verify that startup validates the settings and initializes the database,
and that shutdown drops the catalogue cache.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from commerflow.core.cache import get_cache
from commerflow.server.core.config import Settings
from commerflow.server.main import app, lifespan


class TestLifespanStartup:
    async def test_startup_initializes_database(self):
        with patch("commerflow.server.main.init_db", new_callable=AsyncMock) as mock_init_db:
            async with lifespan(FastAPI()):
                mock_init_db.assert_awaited_once()

    async def test_database_failure_does_not_block_startup(self):
        with patch("commerflow.server.main.init_db", new_callable=AsyncMock, side_effect=RuntimeError("down")):
            with patch("commerflow.server.main.logger") as mock_logger:
                async with lifespan(FastAPI()):
                    pass

        mock_logger.error.assert_called_once()
        assert "down" in mock_logger.error.call_args[0][0]

    async def test_invalid_production_settings_abort_startup(self):
        with patch.object(
            Settings,
            "validate_for_environment",
            side_effect=ValueError("Missing required environment variables: JWT_SECRET"),
        ):
            with patch("commerflow.server.main.init_db", new_callable=AsyncMock) as mock_init_db:
                with pytest.raises(ValueError, match="JWT_SECRET"):
                    async with lifespan(FastAPI()):
                        pass

        mock_init_db.assert_not_awaited()


class TestLifespanShutdown:
    async def test_shutdown_clears_cache(self):
        with patch("commerflow.server.main.init_db", new_callable=AsyncMock):
            async with lifespan(FastAPI()):
                get_cache().set("products:page=1", {"products": []})
                assert get_cache().size() == 1

        assert get_cache().size() == 0


class TestApplicationWiring:
    def test_routes_are_registered(self):
        paths = app.openapi()["paths"]

        for path in (
            "/health",
            "/api/users/register",
            "/api/products",
            "/api/categories",
            "/api/cart",
            "/api/orders",
            "/api/admin/dashboard",
        ):
            assert path in paths

    def test_docs_live_under_api_prefix(self):
        assert app.openapi_url == "/api/openapi.json"
        assert app.docs_url == "/api/docs"

    def test_openapi_documents_route_methods(self):
        paths = app.openapi()["paths"]

        assert set(paths["/api/products/{product_id}"]) == {"get", "put", "delete"}
        assert "post" in paths["/api/orders/{order_id}/cancel"]
