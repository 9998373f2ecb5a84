#!/usr/bin/env python3
"""
Run script for the Login Service.
Flags override the corresponding environment variables.
"""
import argparse
import sys
import traceback

import uvicorn

from login_service.base_microservice import configure_logging, logger
from login_service.config import ServiceConfig
from login_service.main import create_app


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Login service")
    parser.add_argument("--port", type=int, default=None, help="Port on which to run")
    parser.add_argument("--dev", action="store_true", default=None, help="Run in development mode")
    parser.add_argument("--verbose", action="store_true", default=None, help="Verbose logging")
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    config = ServiceConfig.from_env(port=args.port, dev=args.dev, verbose=args.verbose)
    configure_logging(config.log_level)
    try:
        logger.info(f"Login service running on port {config.port}")
        uvicorn.run(
            create_app(config),
            host="0.0.0.0",
            port=config.port,
            log_level="debug" if config.verbose else "info",
        )
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        traceback.print_exc()
        sys.exit(1)
