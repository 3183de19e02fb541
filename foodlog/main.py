#!/usr/bin/env python3
"""
foodlog - Main Entry Point

Loads configuration, configures logging and serves the API with uvicorn.
"""

import uvicorn

from foodlog.app import create_app
from foodlog.config.provider import EnvConfigProvider
from foodlog.logging_config import configure_logging, get_logging_config

config_provider = EnvConfigProvider()
api_config = config_provider.get_api_config()

configure_logging(api_config.log_level)

app = create_app(config_provider)


def run() -> None:
    uvicorn.run(
        "foodlog.main:app",
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        reload=api_config.debug,
        log_config=get_logging_config(api_config.log_level),
    )


if __name__ == "__main__":
    run()
