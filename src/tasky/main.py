"""Application entry point for the tasky backend server."""

from tasky.app import App
from tasky.config import Config
from tasky.logging import setup_logging
from tasky.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
