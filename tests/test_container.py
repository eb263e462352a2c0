"""Tests for container wiring and settings."""

import asyncio
import logging

from fastapi.testclient import TestClient

from pantry_shopping.api.app import create_app
from pantry_shopping.config import parse_log_level
from pantry_shopping.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.shopping_session_service is not None
    assert container.shopping_stats_service is not None
    assert container.ingredient_service is not None
    assert container.reference_data_service is not None
    asyncio.run(container.close_resources())


def test_settings_defaults(settings) -> None:
    assert settings.user_id_header == "X-User-Id"
    assert settings.log_level == "INFO"


def test_parse_log_level() -> None:
    assert parse_log_level(None) == logging.INFO
    assert parse_log_level(" debug ") == logging.DEBUG
    assert parse_log_level("verbose") == logging.INFO
    assert parse_log_level("30") == logging.WARNING


def test_user_id_header_is_configurable(container) -> None:
    container.settings = container.settings.model_copy(
        update={"user_id_header": "X-Pantry-User"}
    )
    client = TestClient(create_app(container))

    assert client.get(
        "/api/v1/shopping-sessions/active", headers={"X-User-Id": "u1"}
    ).status_code == 401
    assert client.get(
        "/api/v1/shopping-sessions/active", headers={"X-Pantry-User": "u1"}
    ).status_code == 200
