# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pydantic models for wrapper configuration.

Models:
    - ErrorMode: Error reporting mode of the underlying connection
    - FetchMode: Default shape of fetched rows
    - WrapperOptions: Connection options applied at construction
    - ConnectionSettings: Complete connection configuration
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ErrorMode(str, Enum):
    """Error reporting modes.

    Attributes:
        EXCEPTION: Driver errors are raised and caught by the wrapper.
    """

    EXCEPTION = "exception"


class FetchMode(str, Enum):
    """Row shapes returned by fetch operations.

    Attributes:
        ASSOC: Rows are mappings keyed by column name.
    """

    ASSOC = "assoc"


class WrapperOptions(BaseModel):
    """Options applied to the underlying connection.

    Unknown keys are kept and passed verbatim to the driver's ``connect``.

    Attributes:
        error_mode: Error reporting mode (only ``exception`` is supported).
        fetch_mode: Default row shape (only ``assoc`` is supported).
        emulate_prepares: Interpolate parameters client-side instead of
            binding them on the server.
        autocommit: Run every statement in its own transaction.
        connect_timeout: Seconds to wait for the connection, driver default if None.
    """

    model_config = ConfigDict(extra="allow")

    error_mode: Annotated[
        ErrorMode,
        Field(default=ErrorMode.EXCEPTION, description="Error reporting mode")
    ]
    fetch_mode: Annotated[
        FetchMode,
        Field(default=FetchMode.ASSOC, description="Default row shape")
    ]
    emulate_prepares: Annotated[
        bool,
        Field(default=False, description="Client-side statement emulation")
    ]
    autocommit: Annotated[
        bool,
        Field(default=True, description="Autocommit every statement")
    ]
    connect_timeout: Annotated[
        int | None,
        Field(default=None, ge=0, description="Connection timeout in seconds")
    ]

    def driver_options(self) -> dict[str, Any]:
        """Return the extra options meant for the driver."""
        return dict(self.model_extra or {})


class ConnectionSettings(BaseModel):
    """Complete connection configuration.

    Attributes:
        host: Database server host, optionally with a ``:port`` suffix.
        port: Database server port, driver default if None.
        database: Database name (file path for SQLite).
        user: Login user.
        password: Login password (never included in repr).
        driver: Driver kind, e.g. ``mysql:`` or ``pgsql:``.
        charset: Connection character set.
        options: Connection options.
    """

    model_config = ConfigDict(extra="forbid")

    host: Annotated[str, Field(default="localhost", description="Server host")]
    port: Annotated[
        int | None,
        Field(default=None, ge=1, le=65535, description="Server port")
    ]
    database: Annotated[str, Field(description="Database name")]
    user: Annotated[str | None, Field(default=None, description="Login user")]
    password: Annotated[
        str | None,
        Field(default=None, repr=False, description="Login password")
    ]
    driver: Annotated[str, Field(default="mysql:", description="Driver kind")]
    charset: Annotated[str, Field(default="utf8mb4", description="Character set")]
    options: Annotated[
        WrapperOptions,
        Field(default_factory=WrapperOptions, description="Connection options")
    ]

    @field_validator("driver")
    @classmethod
    def driver_not_empty(cls, v: str) -> str:
        """Validate that a driver kind is given."""
        if not v.strip().rstrip(":"):
            raise ValueError("driver must not be empty")
        return v.strip()

    @model_validator(mode="after")
    def split_host_port(self) -> ConnectionSettings:
        """Move a ``host:port`` suffix into ``port``."""
        host, sep, port = self.host.rpartition(":")
        if sep and host and ":" not in host and port.isdigit() and self.port is None:
            self.host = host
            self.port = int(port)
        return self

    @property
    def driver_kind(self) -> str:
        """Normalized driver kind: lower case, without the trailing colon."""
        return self.driver.rstrip(":").lower()
