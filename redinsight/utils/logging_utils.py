import logging
import logging.config
from pathlib import Path
from typing import Optional

import yaml

from ..config.settings import settings

DEFAULT_LOGGING_CONFIG_PATH = Path(settings.LOGGING_CONFIG_PATH)


def setup_logging(config_path: Path = DEFAULT_LOGGING_CONFIG_PATH, log_level: Optional[str] = None) -> None:
    """
    Set up logging configuration from a YAML file.

    Args:
        config_path (Path): Path to the logging configuration YAML file.
        log_level (Optional[str]): Override for the ``redinsight`` logger level.
    """
    level = (log_level or settings.LOG_LEVEL).upper()

    if config_path.exists():
        try:
            with open(config_path, 'rt') as f:
                log_config = yaml.safe_load(f.read())
            logging.config.dictConfig(log_config)
            logging.getLogger("redinsight").setLevel(level)
            logging.info(f"Logging configured successfully from {config_path}")
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            logging.basicConfig(level=level)  # Basic config as fallback
            logging.error(f"Error loading logging configuration from {config_path}: {e}. Using basicConfig.")
    else:
        logging.basicConfig(level=level)  # Basic config if no file found
        logging.warning(f"Logging configuration file not found at {config_path}. Using basicConfig.")
