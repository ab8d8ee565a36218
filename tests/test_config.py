from scaffold.config import Settings
from scaffold.core.options import build_options


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SCAFFOLD_ENABLE_RATE", "true")
    monkeypatch.setenv("SCAFFOLD_DISABLE_SWAGGER", "1")
    monkeypatch.setenv("SCAFFOLD_RATE_LIMIT_BURST", "20")

    settings = Settings(_env_file=None)

    assert settings.enable_rate
    assert settings.rate_limit_burst == 20

    opt = build_options(*settings.options())
    assert opt.enable_rate
    assert opt.disable_swagger
    assert not opt.disable_pprof
    assert not opt.enable_cors


def test_default_settings_produce_no_options():
    assert Settings(_env_file=None).options() == []


def test_create_app_from_settings():
    import logging

    from starlette.testclient import TestClient

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        from scaffold.main import app, create_app

        assert TestClient(app).get("/h/ping").json()["data"] == "pong"

        mux = create_app(Settings(_env_file=None, disable_pprof=True, log_json=False))
        client = TestClient(mux)

        assert client.get("/h/ping").json()["data"] == "pong"
        assert client.get("/debug/pprof/").status_code == 404
        assert 'uri="/h/ping"' in client.get("/metrics").text
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
