"""Uvicorn server runner."""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from tasky.app import App
from tasky.config import Config
from tasky.web.server import create_fastapi_app


def build_log_config(debug: bool) -> dict:
    """Uvicorn logging config with compact formats and the app's log level."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    level = "DEBUG" if debug else "INFO"
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        log_config["loggers"].setdefault(name, {})["level"] = level
    return log_config


def run_server(app: App, config: Config) -> None:
    """Run the Uvicorn server; a backend that fails the startup ping stops it before serving."""
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config.debug),
        access_log=config.debug,
    )
