"""Console entry point: `taskhub` reads TASKHUB_* settings and serves the API."""

import structlog

from taskhub.app import App
from taskhub.config import Config
from taskhub.logging import setup_logging
from taskhub.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config)
    structlog.get_logger(__name__).info("starting_server", host=config.host, port=config.port, environment=config.environment)
    run_server(App(config), config)


if __name__ == "__main__":
    main()
