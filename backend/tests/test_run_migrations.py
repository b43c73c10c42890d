from __future__ import annotations

import types

import pytest
from alembic.config import Config

from scripts import run_migrations as runner


def _test_config(monkeypatch) -> Config:
    monkeypatch.setenv("LESSON_DATABASE_URL", "sqlite://")
    config = Config()
    # configparser interpolation turns "%%" back into the literal placeholder.
    config.set_main_option("sqlalchemy.url", "%%(LESSON_DATABASE_URL)s")
    config.set_main_option("script_location", "alembic")
    return config


def test_resolve_database_url_prefers_env(monkeypatch) -> None:
    config = _test_config(monkeypatch)
    assert runner.resolve_database_url(config) == "sqlite://"
    assert config.get_main_option("sqlalchemy.url") == "sqlite://"


def test_resolve_database_url_keeps_explicit_url(monkeypatch) -> None:
    monkeypatch.delenv("LESSON_DATABASE_URL", raising=False)
    config = Config()
    config.set_main_option("sqlalchemy.url", "sqlite:///lessons.db")
    assert runner.resolve_database_url(config) == "sqlite:///lessons.db"


def test_resolve_database_url_requires_env(monkeypatch) -> None:
    config = _test_config(monkeypatch)
    monkeypatch.delenv("LESSON_DATABASE_URL")
    with pytest.raises(RuntimeError):
        runner.resolve_database_url(config)


def test_wait_for_database_succeeds_with_sqlite(tmp_path) -> None:
    db_path = tmp_path / "lessons.sqlite"
    runner.wait_for_database(f"sqlite:///{db_path}", timeout=2, poll_interval=0.1)


def test_wait_for_database_times_out(monkeypatch) -> None:
    class DummyEngine:
        def connect(self) -> types.SimpleNamespace:
            raise runner.OperationalError("SELECT 1", {}, Exception("boom"))

        def dispose(self) -> None:
            pass

    monkeypatch.setattr(runner, "create_engine", lambda *_, **__: DummyEngine())
    with pytest.raises(RuntimeError):
        runner.wait_for_database("postgresql://example", timeout=0, poll_interval=0)


def test_run_migrations_invokes_upgrade(monkeypatch) -> None:
    config = _test_config(monkeypatch)
    recorded: dict[str, object] = {}

    def fake_wait(url: str, *, timeout: int, poll_interval: float) -> None:
        recorded["wait"] = (url, timeout, poll_interval)

    def fake_upgrade(cfg, revision: str, **kwargs) -> None:
        recorded["revision"] = revision
        recorded["kwargs"] = kwargs

    monkeypatch.setattr(runner, "wait_for_database", fake_wait)
    monkeypatch.setattr(runner.command, "upgrade", fake_upgrade)

    runner.run_migrations("head", timeout=5, poll_interval=0.1, config=config)

    assert recorded["revision"] == "head"
    assert recorded["wait"] == ("sqlite://", 5, 0.1)
    assert recorded["kwargs"] == {}


def test_sql_mode_skips_the_readiness_probe(monkeypatch) -> None:
    config = _test_config(monkeypatch)
    recorded: dict[str, object] = {}

    def fail_wait(*_, **__) -> None:
        raise AssertionError("offline rendering must not probe the database")

    monkeypatch.setattr(runner, "wait_for_database", fail_wait)
    monkeypatch.setattr(runner.command, "upgrade", lambda cfg, revision, **kwargs: recorded.update(kwargs))

    runner.run_migrations("head", timeout=5, poll_interval=0.1, config=config, sql=True)
    assert recorded == {"sql": True}


def test_main_reports_failures(monkeypatch) -> None:
    def boom(*_, **__) -> None:
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(runner, "run_migrations", boom)
    assert runner.main(["--timeout", "0"]) == 1
