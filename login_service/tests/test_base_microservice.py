import json

import pytest
from httpx import AsyncClient, ASGITransport

from login_service.auth.exceptions import CredentialSourceError
from login_service.base_microservice import BaseMicroservice
from login_service.config import (
    DEV_CREDENTIALS_FILE, PROD_CREDENTIALS_FILE, PROD_CUSTOMER_SERVICE_URL, ServiceConfig
)
from login_service.main import create_app


@pytest.mark.asyncio
async def test_health_and_root(customer_service, credential_store):
    app = create_app(ServiceConfig(), credential_store=credential_store, directory=customer_service.directory())
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://test", transport=transport) as ac:
        resp = await ac.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["data"]["credentials"] == 2

        resp = await ac.get("/")
        assert resp.status_code == 200
        assert resp.json()["data"]["services"] == ["auth"]


@pytest.mark.asyncio
async def test_lifespan_loads_credentials(tmp_path, customer_service):
    source = tmp_path / "users.json"
    source.write_text(json.dumps([{"id": "1", "name": "eve", "password": "eve"}]), encoding="utf-8")
    app = create_app(ServiceConfig(credentials_file=str(source)), directory=customer_service.directory())

    async with app.router.lifespan_context(app):
        assert app.state.credential_store.validate("eve", "eve")


@pytest.mark.asyncio
async def test_lifespan_fails_without_credentials(tmp_path, customer_service):
    app = create_app(
        ServiceConfig(credentials_file=str(tmp_path / "missing.json")),
        directory=customer_service.directory(),
    )
    with pytest.raises(CredentialSourceError):
        async with app.router.lifespan_context(app):
            pass


def test_log_event_and_error(caplog):
    service = BaseMicroservice("pytest")
    with caplog.at_level("INFO"):
        service.log_event("pytest_log_event", {"foo": "bar"})
        assert any("pytest_log_event" in m for m in caplog.text.splitlines())
    with caplog.at_level("ERROR"):
        try:
            raise ValueError("test error")
        except ValueError as e:
            data = service.log_error(e, context="pytest")
        assert any("test error" in m for m in caplog.text.splitlines())
        assert data["error_type"] == "ValueError"


def test_config_defaults(monkeypatch):
    for name in ("DEV_MODE", "VERBOSE", "PORT", "LOG_LEVEL", "CREDENTIALS_FILE",
                 "CUSTOMER_SERVICE_URL", "DOWNSTREAM_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    config = ServiceConfig.from_env()
    assert config.port == 8084
    assert config.dev is False
    assert config.log_level == "INFO"
    assert config.credentials_file == PROD_CREDENTIALS_FILE
    assert config.customer_service_url == PROD_CUSTOMER_SERVICE_URL
    assert config.downstream_timeout == 10.0


def test_config_dev_mode(monkeypatch):
    monkeypatch.delenv("CREDENTIALS_FILE", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("CUSTOMER_SERVICE_URL", "http://192.168.99.102:32769/")
    config = ServiceConfig.from_env(dev=True, port=9000)
    assert config.port == 9000
    assert config.credentials_file == DEV_CREDENTIALS_FILE
    assert config.customer_service_url == "http://192.168.99.102:32769"
    assert config.log_level == "DEBUG"
