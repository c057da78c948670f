from __future__ import annotations

from sqlalchemy import text

from infra.db import base


def test_importing_base_opens_no_engine():
    assert not hasattr(base, "engine")
    assert not hasattr(base, "SessionLocal")


def test_db_url_override_wins(monkeypatch, tmp_path):
    monkeypatch.setenv("WA_DB_URL", "postgresql://svc@db/analytics")
    monkeypatch.setenv("WA_DATA_DIR", str(tmp_path))

    assert base.resolve_db_url() == "postgresql://svc@db/analytics"
    assert list(tmp_path.iterdir()) == []


def test_default_db_lives_in_the_data_dir(monkeypatch, tmp_path):
    monkeypatch.delenv("WA_DB_URL", raising=False)
    monkeypatch.setenv("WA_DATA_DIR", str(tmp_path / "data"))

    url = base.resolve_db_url()

    assert url == f"sqlite:///{(tmp_path / 'data' / 'workspace_analytics.db').as_posix()}"


def test_session_factory_connects_on_demand(tmp_path):
    factory = base.make_session_factory(f"sqlite:///{(tmp_path / 'wa.db').as_posix()}")
    try:
        with factory() as session:
            assert session.execute(text("SELECT 1")).scalar_one() == 1
    finally:
        factory.kw["bind"].dispose()
