# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration loader for database connection settings.

Connection settings are read from INI-style configuration files. The
``[database]`` section holds the connection parameters; the optional
``[database.options]`` section holds connection options, applied verbatim
to the driver when they are not wrapper options.

Example:
    Configuration file format (config.ini)::

        [database]
        driver = pgsql:
        host = db.example.com:5432
        database = app
        user = app
        password = secret
        charset = utf8

        [database.options]
        connect_timeout = 10
        emulate_prepares = false
        application_name = legacy-app

    Loading the settings::

        settings = load_connection_settings("/etc/app/config.ini")
        db = Wrapper.from_settings(settings)
"""

from __future__ import annotations

import configparser
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .logger import get_logger
from .models import ConnectionSettings

logger = get_logger("config_loader")

_CONNECTION_KEYS = ("host", "port", "database", "user", "password", "driver", "charset")
_TRUE = ("true", "yes", "on")
_FALSE = ("false", "no", "off")


def _coerce(value: str) -> Any:
    """Convert an INI string to bool, int or float when it looks like one."""
    text = value.strip()
    lowered = text.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def load_connection_settings(
    config_path: str | Path, section: str = "database"
) -> ConnectionSettings:
    """Load connection settings from a configuration file.

    Args:
        config_path: Path to config.ini file.
        section: Section holding the connection parameters. Options are
            read from ``[<section>.options]``.

    Returns:
        Validated ConnectionSettings.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If the section is missing or holds invalid values.
    """
    if not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    # Values are taken literally, '%' is common in passwords
    config = configparser.ConfigParser(interpolation=None)
    config.read(config_path)

    if not config.has_section(section):
        raise ValueError(f"Missing [{section}] section in {config_path}")

    data: dict[str, Any] = {}
    for key, value in config.items(section):
        if key not in _CONNECTION_KEYS:
            logger.warning(f"Ignoring unknown key in [{section}] section: {key}")
            continue
        value = value.strip()
        if value:
            data[key] = value

    options_section = f"{section}.options"
    if config.has_section(options_section):
        data["options"] = {
            key: _coerce(value) for key, value in config.items(options_section)
        }

    try:
        settings = ConnectionSettings.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid [{section}] configuration: {e}")
        raise ValueError(f"Invalid [{section}] configuration: {e}") from e

    logger.info(f"Loaded {settings.driver_kind} connection settings for {settings.database}")
    return settings
