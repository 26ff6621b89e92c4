from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from tests.conftest import TestSchemaData as TSD
from tsgql.config import DEFAULT_OUTPUT_PATH, DEFAULT_SCHEMA_PATH, ProjectConfig, load_project_config


def write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "tsgql.yaml"
    path.write_text(content, encoding="utf-8")
    return path


def test_load_project_config() -> None:
    config = load_project_config(TSD.PROJECT_CONFIG)
    assert config.schema_path == TSD.TESTS_DATA_DIR / "args.ts"
    assert config.manifest == TSD.TESTS_DATA_DIR / "args_manifest.json"
    assert config.out == TSD.TESTS_DATA_DIR / "out" / "schema.graphql"


@pytest.mark.parametrize("content", ["", "null\n", "{}\n"])
def test_empty_config_uses_defaults(tmp_path: Path, content: str) -> None:
    config = load_project_config(write_config(tmp_path, content))
    assert config.schema_path == tmp_path / DEFAULT_SCHEMA_PATH
    assert config.manifest is None
    assert config.out == tmp_path / DEFAULT_OUTPUT_PATH


def test_absolute_paths_are_kept(tmp_path: Path) -> None:
    config = load_project_config(write_config(tmp_path, "schema: /srv/schema.ts\nout: /srv/out.graphql\n"))
    assert config.schema_path == Path("/srv/schema.ts")
    assert config.out == Path("/srv/out.graphql")


def test_populate_by_name() -> None:
    assert ProjectConfig(schema_path=Path("a.ts")).schema_path == Path("a.ts")
    assert ProjectConfig.model_validate({"schema": "b.ts"}).schema_path == Path("b.ts")


def test_unknown_key(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        load_project_config(write_config(tmp_path, "schema: a.ts\noutput: b.graphql\n"))


def test_root_must_be_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="must be a mapping"):
        load_project_config(write_config(tmp_path, "- a.ts\n"))


def test_invalid_yaml(tmp_path: Path) -> None:
    with pytest.raises(yaml.YAMLError):
        load_project_config(write_config(tmp_path, "schema: [a.ts\n"))
