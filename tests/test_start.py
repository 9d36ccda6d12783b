import pytest

from scripts import start


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for k in ("PORT", "WEB_CONCURRENCY", "GUNICORN_TIMEOUT", "RUN_MIGRATIONS_ON_START", "LOG_LEVEL"):
        monkeypatch.delenv(k, raising=False)


@pytest.fixture()
def calls(monkeypatch):
    recorded = {"release": 0, "exec": None}

    def fake_release():
        recorded["release"] += 1

    def fake_execvp(file, args):
        recorded["exec"] = (file, args)

    monkeypatch.setattr("scripts.release.run_release", fake_release)
    monkeypatch.setattr(start.os, "execvp", fake_execvp)
    return recorded


def test_gunicorn_argv_uses_settings(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("WEB_CONCURRENCY", "4")
    monkeypatch.setenv("GUNICORN_TIMEOUT", "30")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    argv = start.gunicorn_argv(start.load_settings())
    assert argv[:2] == ["gunicorn", "app.wsgi:app"]
    assert argv[argv.index("--bind") + 1] == "0.0.0.0:9000"
    assert argv[argv.index("--workers") + 1] == "4"
    assert argv[argv.index("--timeout") + 1] == "30"
    assert argv[argv.index("--log-level") + 1] == "debug"


def test_main_runs_release_then_execs(calls):
    assert start.main() == 0
    assert calls["release"] == 1
    file, args = calls["exec"]
    assert file == "gunicorn"
    assert args[args.index("--bind") + 1] == "0.0.0.0:8080"


def test_main_skips_release_when_disabled(monkeypatch, calls):
    monkeypatch.setenv("RUN_MIGRATIONS_ON_START", "0")
    assert start.main() == 0
    assert calls["release"] == 0
    assert calls["exec"] is not None


@pytest.mark.parametrize("name,value", [("PORT", "70000"), ("PORT", "http"), ("WEB_CONCURRENCY", "0")])
def test_main_rejects_bad_settings(monkeypatch, calls, name, value):
    monkeypatch.setenv(name, value)
    assert start.main() == 1
    assert calls["exec"] is None
    assert calls["release"] == 0


def test_main_stops_when_release_fails(monkeypatch, calls):
    def failing_release():
        raise RuntimeError("Missing required environment variable DATABASE_URL.")

    monkeypatch.setattr("scripts.release.run_release", failing_release)
    assert start.main() == 1
    assert calls["exec"] is None
