from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum, auto
from importlib import resources
from pathlib import Path
from types import MappingProxyType

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from proj2tree.exceptions import ConfigParseError
from proj2tree.ignore import IgnoreMatcher
from proj2tree.logging import logger

CONFIG_SECTION = "proj2tree"
DEFAULT_LANGUAGE = "text"
DEFAULT_OUTPUT_NAME = "tree.md"


class EntryClass(StrEnum):
    """How a filesystem entry shows up in the rendered document.

    INCLUDED entries are rendered (and descended into when they are directories).
    EXCLUDED_VISIBLE directories appear in the tree with an ellipsis but are not
    expanded. EXCLUDED_HIDDEN entries leave no trace at all.
    """

    INCLUDED = auto()
    EXCLUDED_VISIBLE = auto()
    EXCLUDED_HIDDEN = auto()


class ExclusionPolicy(BaseModel):
    """Static exclusion rules and the extension to language mapping.

    Attributes:
        exclude_dirs: Directory basenames shown with an ellipsis and never expanded.
        exclude_files: File basenames or `*.<suffix>` patterns hidden everywhere.
        exclude_extensions: Lowercased extensions whose contents are never rendered.
        max_file_size: Byte ceiling above which contents are not rendered.
        extension_mapping: Lowercased extension to code fence language.
    """

    model_config = ConfigDict(frozen=True)

    exclude_dirs: frozenset[str] = Field(default_factory=frozenset)
    exclude_files: tuple[str, ...] = Field(default_factory=tuple)
    exclude_extensions: frozenset[str] = Field(default_factory=frozenset)
    max_file_size: int | None = Field(default=None, ge=0)
    extension_mapping: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))

    @field_validator("exclude_extensions", mode="before")
    @classmethod
    def _normalize_extensions(cls, value: object) -> object:
        if value is None:
            return frozenset()
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(str(ext).lower().lstrip(".") for ext in value)
        return value

    @field_validator("extension_mapping", mode="before")
    @classmethod
    def _normalize_mapping(cls, value: object) -> object:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(ext).lower().lstrip("."): str(lang) for ext, lang in value.items()}
        return value

    @field_validator("extension_mapping", mode="after")
    @classmethod
    def _freeze_mapping(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_validator("exclude_dirs", "exclude_files", mode="before")
    @classmethod
    def _none_is_empty(cls, value: object) -> object:
        return () if value is None else value

    def language_for(self, extension: str) -> str:
        """Return the fence language for a lowercased extension, or the default tag."""
        return self.extension_mapping.get(extension, DEFAULT_LANGUAGE)


class RenderOptions(BaseModel):
    """Which sections to render and which output file to keep out of the document."""

    model_config = ConfigDict(frozen=True)

    include_tree: bool = True
    include_contents: bool = True
    output_name: str | None = DEFAULT_OUTPUT_NAME


class ScanContext(BaseModel):
    """Read-only state shared by every recursive rendering call."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    root: Path
    policy: ExclusionPolicy = Field(default_factory=ExclusionPolicy)
    matcher: IgnoreMatcher | None = None
    options: RenderOptions = Field(default_factory=RenderOptions)


def parse_config_payload(text: str, source: str = "<builtin>") -> ExclusionPolicy:
    """Parse a YAML payload holding a `proj2tree` section into an ExclusionPolicy.

    Args:
        text (str): the YAML document
        source (str): a label for the payload, used in error reports

    Raises:
        ConfigParseError: if the YAML is invalid, the section is missing or its values do not validate.

    Returns:
        ExclusionPolicy: the validated policy
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(source=source, reason=str(e)) from e
    if not isinstance(data, dict) or not isinstance(data.get(CONFIG_SECTION), dict):
        raise ConfigParseError(source=source, reason=f"missing '{CONFIG_SECTION}' section")
    try:
        return ExclusionPolicy.model_validate(data[CONFIG_SECTION])
    except ValidationError as e:
        raise ConfigParseError(source=source, reason=str(e)) from e


def load_builtin_config() -> ExclusionPolicy:
    """Load the exclusion rules shipped with the package.

    Falls back to an empty policy (nothing excluded by rule) when the payload
    cannot be read or parsed.
    """
    try:
        text = resources.files("proj2tree").joinpath("defaults.yaml").read_text(encoding="utf-8")
        return parse_config_payload(text)
    except ConfigParseError as e:
        logger.warning("Built-in configuration unusable, using empty exclusions: %s", e.reason)
    except OSError as e:
        logger.warning("Built-in configuration unreadable, using empty exclusions: %s", e)
    return ExclusionPolicy()


def load_config_file(path: Path) -> ExclusionPolicy:
    """Load exclusion rules from a user supplied YAML file.

    Same fallback behaviour as `load_builtin_config`.
    """
    try:
        return parse_config_payload(path.read_text(encoding="utf-8"), source=str(path))
    except ConfigParseError as e:
        logger.warning("Configuration file %s unusable, using empty exclusions: %s", path, e.reason)
    except OSError as e:
        logger.warning("Configuration file %s unreadable, using empty exclusions: %s", path, e)
    return ExclusionPolicy()
