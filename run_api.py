#!/usr/bin/env python
"""
Signal API Server Runner.

Usage:
    python run_api.py

Or with PM2:
    pm2 start run_api.py --interpreter python
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from core.config import SignalConfig

load_dotenv()

logger = logging.getLogger(__name__)


def main():
    """Run the signal API server."""
    config = SignalConfig.from_env()

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger.info(f"Starting Signal API on {config.api_host}:{config.api_port}")

    try:
        from api.main import create_app

        uvicorn.run(
            create_app(config=config),
            host=config.api_host,
            port=config.api_port,
            log_level=config.log_level.lower(),
            access_log=True,
        )
    except Exception as e:
        logger.error(f"Failed to start signal API: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
