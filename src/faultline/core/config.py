# src/faultline/core/config.py
"""
Configuration schema and loading for faultline.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

A projection block starts from a preset spec and layers explicit fields
on top of it with EventSpec.layered. Fields left at "unset" leave the
preset alone; start from ``preset: raw`` to build a spec from nothing.
"""

import importlib
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from faultline.projection import EventSpec
from faultline.projection.digest import All, AttachmentAction, ByType, Custom, Smart

FieldMode = Literal["unset", "inferred"]

_PRESETS = {
    "raw": EventSpec,
    "brief": EventSpec.brief,
    "defaults": EventSpec.defaults,
    "standard": EventSpec.standard,
}


def resolve_type(path: str) -> type:
    """Resolve ``"package.module:QualName"`` (or ``"package.module.Name"``) to a type.

    Raises:
        ValueError: If the module or attribute cannot be found, or is not a type
    """
    if ":" in path:
        module_name, _, qualname = path.partition(":")
    else:
        module_name, _, qualname = path.rpartition(".")
    if not module_name or not qualname:
        raise ValueError(f"Type path must look like 'module:QualName', got {path!r}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module {module_name!r} for type {path!r}: {e}") from e
    for part in qualname.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ValueError(f"Module {module_name!r} has no attribute {qualname!r}") from None
    if not isinstance(target, type):
        raise ValueError(f"{path!r} resolves to {type(target).__name__}, not a type")
    return target


class ExplicitValue(BaseModel):
    """An explicit string value for a tri-state field."""

    model_config = {"frozen": True, "extra": "forbid"}

    value: str


class OfTypeAttachments(BaseModel):
    """Select attachments of one type, given as an import path."""

    model_config = {"frozen": True, "extra": "forbid"}

    of_type: str

    @field_validator("of_type")
    @classmethod
    def validate_of_type(cls, v: str) -> str:
        resolve_type(v)
        return v


class ExtraAttachment(BaseModel):
    """A literal extra string."""

    model_config = {"frozen": True, "extra": "forbid"}

    extra: str


AttachmentSetting = Literal["smart", "all"] | OfTypeAttachments | ExtraAttachment


class ProjectionSettings(BaseModel):
    """How report nodes become events.

    Example YAML:
        projection:
          preset: defaults
          attachments: [smart, {extra: "service=billing"}]
          children:
            preset: brief
    """

    model_config = {"frozen": True, "extra": "forbid"}

    preset: Literal["raw", "brief", "defaults", "standard"] = Field(
        default="standard",
        description="Base spec the other fields are layered onto",
    )
    exception_type: FieldMode | ExplicitValue = "unset"
    message: str | None = None
    timestamp: Literal["unset", "inferred", "now"] | datetime = "unset"
    backtrace: FieldMode | ExplicitValue = "unset"
    escaped: bool | None = None
    attachments: tuple[AttachmentSetting, ...] = ()
    children: "FieldMode | ProjectionSettings" = "unset"

    def to_spec(self) -> EventSpec:
        """Build the EventSpec: preset first, explicit fields layered on top."""
        return _PRESETS[self.preset]().layered(self._overrides())

    def _overrides(self) -> EventSpec:
        spec = EventSpec()

        if self.exception_type == "inferred":
            spec = spec.infer_type()
        elif isinstance(self.exception_type, ExplicitValue):
            spec = spec.set_type(self.exception_type.value)

        if self.message is not None:
            spec = spec.set_message(self.message)

        if isinstance(self.timestamp, datetime):
            spec = spec.set_timestamp(self.timestamp)
        elif self.timestamp == "inferred":
            spec = spec.infer_timestamp()
        elif self.timestamp == "now":
            spec = spec.timestamp_now()

        if self.backtrace == "inferred":
            spec = spec.infer_backtrace()
        elif isinstance(self.backtrace, ExplicitValue):
            spec = spec.set_backtrace(self.backtrace.value)

        if self.escaped is not None:
            spec = spec.set_escaped(self.escaped)

        for setting in self.attachments:
            spec = spec.add_attachment_action(_attachment_action(setting))

        if self.children == "inferred":
            spec = spec.recurse()
        elif isinstance(self.children, ProjectionSettings):
            spec = spec.with_children(self.children.to_spec())

        return spec


ProjectionSettings.model_rebuild()


def _attachment_action(setting: AttachmentSetting) -> AttachmentAction:
    if isinstance(setting, OfTypeAttachments):
        return ByType(resolve_type(setting.of_type))
    if isinstance(setting, ExtraAttachment):
        return Custom(setting.extra)
    if setting == "all":
        return All()
    return Smart()


class SinkSettings(BaseModel):
    """One sink to create at startup.

    Example YAML:
        sinks:
          - name: console
            options:
              format: pretty
    """

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(description="Sink name as registered via faultline_get_sinks")
    options: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("sink name cannot be empty")
        return v.strip()


class LoggingSettings(BaseModel):
    """structlog output configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class FaultlineSettings(BaseModel):
    """Top-level settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    projection: ProjectionSettings = Field(default_factory=ProjectionSettings)
    sinks: tuple[SinkSettings, ...] = ()
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_settings(config_path: Path) -> FaultlineSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence:
    1. Environment variables (FAULTLINE_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Environment variable format: FAULTLINE_LOGGING__LEVEL for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If the config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="FAULTLINE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; filter its internal settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return FaultlineSettings(**raw_config)
