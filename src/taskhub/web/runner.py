"""Uvicorn runner; uvicorn's own loggers share the application format."""

from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from taskhub.app import App
from taskhub.config import Config
from taskhub.web.server import create_fastapi_app


def build_log_config(config: Config) -> dict[str, Any]:
    log_config: dict[str, Any] = {**LOGGING_CONFIG, "formatters": {k: dict(v) for k, v in LOGGING_CONFIG["formatters"].items()}}
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    if config.environment != "development":
        log_config["formatters"]["access"]["use_colors"] = False
        log_config["formatters"]["default"]["use_colors"] = False
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config),
        access_log=True,
        proxy_headers=True,
    )
