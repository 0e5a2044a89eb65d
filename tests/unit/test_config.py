"""Tests for Settings validation."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings

_BASE = {
    "primary_database_url": "sqlite+aiosqlite:///primary.db",
    "secret_key": "k",
}


def test_valid_settings() -> None:
    settings = Settings(**_BASE, branch_map={5: "db://branch-5"})
    assert settings.branch_map == {5: "db://branch-5"}
    assert settings.site_name_for(5) == "分站 #5"


def test_primary_database_url_required() -> None:
    with pytest.raises(ValidationError, match="PRIMARY_DATABASE_URL"):
        Settings(primary_database_url="", secret_key="k")


def test_secret_key_required() -> None:
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        Settings(primary_database_url=_BASE["primary_database_url"], secret_key="")


def test_branch_map_rejects_tenant_zero() -> None:
    with pytest.raises(ValidationError, match="positive tenant ids"):
        Settings(**_BASE, branch_map={0: "db://elsewhere"})


def test_endpoint_template_needs_hostname() -> None:
    with pytest.raises(ValidationError, match="hostname"):
        Settings(**_BASE, branch_endpoint_template="sqlite+libsql://fixed-host")


def test_branch_map_from_env_json(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BRANCH_MAP", '{"7": "db://branch-7"}')
    settings = Settings(**_BASE)
    assert settings.branch_map == {7: "db://branch-7"}
