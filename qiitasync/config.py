"""
Configuration loaded from environment variables and .env files.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_ROOT_DIR = "."
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TIMEOUT = 30


@dataclass
class Config:
    """
    Settings shared by the CLI commands.

    ``root_dir`` is the directory under which "mine/" and team directories
    are created; every save is relative to it.
    """

    access_token: Optional[str] = None
    root_dir: str = DEFAULT_ROOT_DIR
    log_level: str = DEFAULT_LOG_LEVEL
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        Returns:
            Config instance
        """
        timeout = os.environ.get("QIITA_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = int(timeout)
        except ValueError:
            logger.warning(f"Invalid QIITA_TIMEOUT {timeout!r}, using {DEFAULT_TIMEOUT}")
            timeout = DEFAULT_TIMEOUT

        config = cls(
            access_token=os.environ.get("QIITA_ACCESS_TOKEN") or None,
            root_dir=os.environ.get("QIITA_ROOT_DIR", DEFAULT_ROOT_DIR),
            log_level=os.environ.get("QIITA_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            timeout=timeout,
        )
        logger.debug(f"Configuration loaded: root_dir={config.root_dir}, log_level={config.log_level}")
        return config
