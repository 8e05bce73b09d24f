"""Configuration loading utilities."""

from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from keelcast.utils.logging import get_logger

if TYPE_CHECKING:
    from keelcast.models.config import AppConfig

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_CONFIG_PATH = Path("config/keelcast.yaml")


def load_yaml_config(file_path: Path | str, model_class: type[T]) -> T:
    """
    Load and validate YAML configuration file.

    Args:
        file_path: Path to YAML configuration file
        model_class: Pydantic model class to validate against

    Returns:
        Validated configuration instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
        yaml.YAMLError: If YAML is malformed

    Examples:
        >>> from keelcast.models.config import AppConfig
        >>> config = load_yaml_config("config/keelcast.yaml", AppConfig)
    """
    path = Path(file_path)

    if not path.exists():
        logger.error("Configuration file not found", path=str(path))
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("r") as f:
            raw_config = yaml.safe_load(f) or {}

        config = model_class.model_validate(raw_config)
        logger.info("Configuration loaded", path=str(path), model=model_class.__name__)
        return config

    except yaml.YAMLError as e:
        logger.error("Invalid YAML syntax", path=str(path), error=str(e))
        raise

    except ValidationError as e:
        logger.error("Configuration validation failed", path=str(path), error=str(e))
        raise


def load_app_config(file_path: Path | str | None = None) -> "AppConfig":
    """
    Load application configuration.

    An explicit path must exist. Without one, ``config/keelcast.yaml`` is used
    when present and built-in defaults otherwise.

    Args:
        file_path: Path to the YAML file, or None for the default location

    Returns:
        AppConfig instance
    """
    from keelcast.models.config import AppConfig

    if file_path is not None:
        return load_yaml_config(file_path, AppConfig)

    if DEFAULT_CONFIG_PATH.exists():
        return load_yaml_config(DEFAULT_CONFIG_PATH, AppConfig)

    logger.debug("No configuration file found, using defaults", path=str(DEFAULT_CONFIG_PATH))
    return AppConfig()
