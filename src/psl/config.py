"""Parser configuration.

The PSL currently has exactly one group, the bulk-managed Amazon
suffixes, delimited by two fixed comment lines. Group handling in the
parser is generic over the entries registered here, so more groups can
be declared in a YAML file without touching the parser:

    groups:
      - name: Amazon
        start: "// Amazon : https://www.amazon.com/"
        end: "// concludes Amazon"
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, model_validator


class ConfigError(Exception):
    """Raised when a parser configuration file is malformed."""


class GroupMarker(BaseModel):
    """The literal start and end lines that delimit one group."""

    name: str
    start: str
    end: str


AMAZON_GROUP = GroupMarker(
    name="Amazon",
    start="// Amazon : https://www.amazon.com/",
    end="// concludes Amazon",
)


class ParserConfig(BaseModel):
    groups: list[GroupMarker] = [AMAZON_GROUP]

    @model_validator(mode="after")
    def _check_unique_markers(self) -> "ParserConfig":
        seen: set[str] = set()
        for group in self.groups:
            for marker in (group.start, group.end):
                if marker in seen:
                    raise ValueError(f"group marker {marker!r} is used more than once")
                seen.add(marker)
        return self

    def group_starting_with(self, line: str) -> GroupMarker | None:
        for group in self.groups:
            if line == group.start:
                return group
        return None

    def group_ending_with(self, line: str) -> GroupMarker | None:
        for group in self.groups:
            if line == group.end:
                return group
        return None

    def is_group_marker(self, line: str) -> bool:
        return (
            self.group_starting_with(line) is not None
            or self.group_ending_with(line) is not None
        )


DEFAULT_CONFIG = ParserConfig()


def config_from_dict(data: dict | None) -> ParserConfig:
    try:
        return ParserConfig.model_validate(data or {})
    except ValidationError as exc:
        raise ConfigError(f"invalid parser config: {exc}") from exc


def load_config(path: str | Path) -> ParserConfig:
    """Load a ParserConfig from a YAML file."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: {exc}") from exc

    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")
    return config_from_dict(data)
