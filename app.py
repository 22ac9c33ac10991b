#!/usr/bin/env python3
"""
Flask entry point for This or That.

Uses environment variables for configuration (optionally from a .env file).
A missing GEMINI_API_KEY does not stop the server: the page shows the
configuration error and no request is sent to Gemini.
"""
import logging
import os
import sys

from dotenv import load_dotenv

from this_or_that.config import ThisOrThatConfig
from this_or_that.config_loader import load_config_from_env
from this_or_that.exceptions import ConfigurationError
from this_or_that.web import create_app

# Load environment variables
load_dotenv()

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


def _load_config() -> ThisOrThatConfig:
    try:
        return load_config_from_env(load_env_file=False)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)


app = create_app(_load_config())


if __name__ == "__main__":
    port = int(os.getenv("PORT", 7860))
    # Disable debug mode for production
    app.run(host="0.0.0.0", port=port, debug=False)
