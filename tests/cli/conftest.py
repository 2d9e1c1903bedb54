# tests/cli/conftest.py
from __future__ import annotations

import pytest
from typer.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def offline_client(monkeypatch, civitai_routes, api_host):
    """Make every CivitaiClient built by the CLI talk to the fake session."""
    from airgrab.core import client as client_mod

    real = client_mod.CivitaiClient

    def _factory(api_key=None, **kw):
        kw["session"] = civitai_routes
        return real(api_key, **kw)

    monkeypatch.setenv("AIRGRAB_API_HOST", api_host)
    monkeypatch.setattr(client_mod, "CivitaiClient", _factory)
    return civitai_routes
