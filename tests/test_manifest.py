import json
from pathlib import Path
from typing import Any

import pytest

from tests.conftest import TestSchemaData as TSD
from tsgql.errors import ErrorMessages, ManifestError
from tsgql.manifest import GraphQLKind, Manifest, infer_manifest, is_input_marker, load_manifest
from tsgql.parser import parse_module


class TestManifest:
    def test_classify(self) -> None:
        manifest = Manifest.from_raw({"User": 0, "UserInput": 1, "Color": 2})
        assert manifest.classify("User") == GraphQLKind.OBJECT
        assert manifest.classify("UserInput") == GraphQLKind.INPUT
        assert manifest.classify("Color") == GraphQLKind.ENUM
        assert manifest.classify("Unknown") is None

    def test_mapping_protocol(self) -> None:
        manifest = Manifest({"User": GraphQLKind.OBJECT})
        assert "User" in manifest
        assert manifest["User"] == GraphQLKind.OBJECT
        assert list(manifest) == ["User"]
        assert len(manifest) == 1
        assert dict(manifest) == {"User": GraphQLKind.OBJECT}

    def test_is_read_only(self) -> None:
        kinds = {"User": GraphQLKind.OBJECT}
        manifest = Manifest(kinds)
        kinds["Player"] = GraphQLKind.OBJECT
        assert "Player" not in manifest
        with pytest.raises(TypeError):
            manifest._kinds["Player"] = GraphQLKind.OBJECT  # type: ignore[index]

    @pytest.mark.parametrize(
        "tag,expected",
        [("object", GraphQLKind.OBJECT), ("Input", GraphQLKind.INPUT), ("ENUM", GraphQLKind.ENUM)],
    )
    def test_kind_names(self, tag: str, expected: GraphQLKind) -> None:
        assert Manifest.from_raw({"T": tag}).classify("T") == expected

    @pytest.mark.parametrize("tag", [3, -1, True, "scalar", None, 1.0])
    def test_invalid_kinds(self, tag: Any) -> None:
        with pytest.raises(ManifestError, match=ErrorMessages.INVALID_KIND) as exc_info:
            Manifest.from_raw({"User": tag})
        assert exc_info.value.context == "User"

    def test_invalid_key(self) -> None:
        with pytest.raises(ManifestError, match="type names"):
            Manifest.from_raw({1: 0})

    def test_to_raw(self) -> None:
        raw = {"User": 0, "UserInput": 1}
        assert Manifest.from_raw(raw).to_raw() == raw


class TestLoadManifest:
    @pytest.mark.parametrize("path", [TSD.ARGS_MANIFEST_JSON, TSD.ARGS_MANIFEST_YAML])
    def test_load(self, path: Path) -> None:
        assert load_manifest(path).to_raw() == {"User": 0, "FindUserInput": 1, "Query": 0, "Mutation": 0}

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "manifest.yaml"
        path.write_text("", encoding="utf-8")
        assert len(load_manifest(path)) == 0

    @pytest.mark.parametrize(
        "filename,content,message",
        [
            ("manifest.json", "{not json", "Cannot parse manifest"),
            ("manifest.yml", "User: [0", "Cannot parse manifest"),
            ("manifest.json", json.dumps([0, 1]), "must be a mapping"),
            ("manifest.json", json.dumps({"User": 7}), ErrorMessages.INVALID_KIND),
        ],
    )
    def test_invalid(self, tmp_path: Path, filename: str, content: str, message: str) -> None:
        path = tmp_path / filename
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ManifestError, match=message):
            load_manifest(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_manifest(tmp_path / "missing.json")


class TestInferManifest:
    def test_exported_aliases_only(self) -> None:
        module = parse_module(
            """
            export type User = { id: string }
            export type UserInput = Input<{ id: string }>
            type Helper = { value: string }
            """
        )
        assert infer_manifest(module).to_raw() == {"User": 0, "UserInput": 1}

    def test_every_alias_when_nothing_is_exported(self) -> None:
        module = parse_module(TSD.ARGS_SCHEMA.read_text(encoding="utf-8"))
        assert infer_manifest(module).to_raw() == {"User": 0, "FindUserInput": 1, "Query": 0, "Mutation": 0}

    def test_is_input_marker(self) -> None:
        module = parse_module("type A = Input<{ id: string }>\ntype B = Input\ntype C = Other<{ id: string }>")
        assert [is_input_marker(alias.type) for alias in module] == [True, False, False]
