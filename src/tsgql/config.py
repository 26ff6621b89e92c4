from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field

from tsgql import log

DEFAULT_CONFIG_FILENAME = "tsgql.yaml"
DEFAULT_SCHEMA_PATH = Path("./src/schema.ts")
DEFAULT_OUTPUT_PATH = Path("./schema.graphql")


class ProjectConfig(BaseModel):
    """Where to read the TypeScript schema and manifest from, and where to write the SDL."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    schema_path: Path = Field(DEFAULT_SCHEMA_PATH, alias="schema")
    manifest: Path | None = None
    out: Path = DEFAULT_OUTPUT_PATH

    def resolve_paths(self, base_dir: Path) -> "ProjectConfig":
        """Return a copy with relative paths made relative to `base_dir`."""

        def resolve(path: Path) -> Path:
            return path if path.is_absolute() else base_dir / path

        return self.model_copy(
            update={
                "schema_path": resolve(self.schema_path),
                "manifest": resolve(self.manifest) if self.manifest else None,
                "out": resolve(self.out),
            }
        )


def load_project_config(config_path: Path) -> ProjectConfig:
    """
    Load and validate a project configuration from a YAML file.

    The schema source is given under the `schema` key. Relative paths are
    resolved against the directory of the configuration file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        A validated ProjectConfig

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the YAML root is not a mapping.
        ValidationError: If validation against ProjectConfig fails.
    """
    raw: Any
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug("Loaded project config from %s", config_path)

    # Treat empty file or explicit YAML null as "defaults"
    if raw is None or raw == {}:
        return ProjectConfig().resolve_paths(config_path.parent)

    if not isinstance(raw, dict):
        raise TypeError(f"Project config root must be a mapping (YAML object), got {type(raw).__name__}")

    raw_dict = cast(dict[str, Any], raw)
    return ProjectConfig.model_validate(raw_dict).resolve_paths(config_path.parent)
