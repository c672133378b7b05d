"""Session configuration model and config factory contract."""

import copy
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import SessionConfigurationError
from ..utils.tables import deep_extend, lookup_section


class SessionConfig(BaseModel):
    """Everything a transport needs to start one language-server session.

    Unknown fields are kept as-is so transports can carry their own
    options (capabilities, handlers and so on).
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    name: str
    cmd: list[str]
    cmd_cwd: str | None = Field(default=None)
    cmd_env: dict[str, str] = Field(default_factory=dict)
    root_dir: str | None = Field(default=None)
    settings: dict[str, Any] = Field(default_factory=dict)
    init_options: dict[str, Any] = Field(default_factory=dict)
    on_exit: Callable[..., Any] | None = Field(default=None)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Session name cannot be empty")
        return v.strip()

    @field_validator("cmd")
    @classmethod
    def validate_cmd(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("Command cannot be empty")
        if not v[0]:
            raise ValueError("Command executable cannot be empty")
        return v

    def lookup_setting(self, section: str) -> Any:
        """Look up a dotted settings section, e.g. ``"python.analysis"``."""
        return lookup_section(self.settings, section)

    def merge_settings(self, *sources: Mapping[str, Any]) -> dict[str, Any]:
        """Deep-merge ``sources`` into the settings and return them."""
        deep_extend(self.settings, *sources)
        return self.settings

    @classmethod
    def coerce(cls, value: Any, root_dir: str | None = None) -> "SessionConfig":
        """Turn a config factory result into a fresh ``SessionConfig``.

        A ``SessionConfig`` is copied so the factory's own object is never
        modified; a mapping is validated.

        Raises:
            SessionConfigurationError: If required fields are missing or invalid
        """
        if isinstance(value, SessionConfig):
            return value.model_copy(update={"settings": copy.deepcopy(value.settings)})
        if not isinstance(value, Mapping):
            raise SessionConfigurationError(
                f"Config factory returned {type(value).__name__}, expected a mapping",
                root_dir=root_dir,
            )
        try:
            return cls.model_validate(dict(value))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise SessionConfigurationError(
                f"Invalid session config: {problems}", root_dir=root_dir
            ) from e


SessionConfigFactory = Callable[[str], SessionConfig | Mapping[str, Any]]
