"""Tests for the uvicorn runner setup."""

from uvicorn.config import LOGGING_CONFIG

from tasky.app import App
from tasky.web import runner


class TestBuildLogConfig:
    def test_debug_level(self):
        log_config = runner.build_log_config(debug=True)
        assert log_config["loggers"]["uvicorn"]["level"] == "DEBUG"
        assert log_config["loggers"]["uvicorn.access"]["level"] == "DEBUG"

    def test_production_level(self):
        log_config = runner.build_log_config(debug=False)
        assert log_config["loggers"]["uvicorn.error"]["level"] == "INFO"

    def test_uvicorn_defaults_untouched(self):
        original_fmt = LOGGING_CONFIG["formatters"]["default"]["fmt"]
        runner.build_log_config(debug=True)
        assert LOGGING_CONFIG["formatters"]["default"]["fmt"] == original_fmt


def test_run_server_uses_config(make_config, client_factory, monkeypatch):
    config = make_config(host="127.0.0.1", port=9000, debug=True)
    calls = []
    monkeypatch.setattr(runner.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    runner.run_server(App(config, client_factory), config)

    ((fastapi_app, kwargs),) = calls
    assert fastapi_app.state.config is config
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 9000
    assert kwargs["access_log"] is True
    assert kwargs["log_config"]["loggers"]["uvicorn"]["level"] == "DEBUG"
