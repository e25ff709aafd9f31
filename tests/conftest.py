"""Shared fixtures for sdkgen tests."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from sdkgen.codegen.core.config import GenerationConfig
from sdkgen.codegen.core.generator import GeneratedState, Generator
from sdkgen.codegen.core.overlay import OverlayTarget
from sdkgen.codegen.core.schema import Schema, set_schema_parents
from sdkgen.introspection import parse_introspection_response

SCHEMA_VERSION = "v0.13.0"


def _named(kind: str, name: str) -> Dict[str, Any]:
    return {"kind": kind, "name": name, "ofType": None}


def _non_null(inner: Dict[str, Any]) -> Dict[str, Any]:
    return {"kind": "NON_NULL", "name": None, "ofType": inner}


def _list(inner: Dict[str, Any]) -> Dict[str, Any]:
    return {"kind": "LIST", "name": None, "ofType": inner}


def _field(name: str, type_ref: Dict[str, Any], args=None, description=None):
    return {
        "name": name,
        "description": description,
        "args": args or [],
        "type": type_ref,
        "isDeprecated": False,
        "deprecationReason": None,
    }


def _arg(name: str, type_ref: Dict[str, Any]) -> Dict[str, Any]:
    return {"name": name, "description": None, "type": type_ref, "defaultValue": None}


def _object(name: str, fields: List[Dict[str, Any]], description=None):
    return {
        "kind": "OBJECT",
        "name": name,
        "description": description,
        "fields": fields,
        "inputFields": None,
        "interfaces": [],
        "enumValues": None,
        "possibleTypes": None,
    }


def build_introspection_data() -> Dict[str, Any]:
    """A small but complete introspection response (without envelope)."""
    string = _named("SCALAR", "String")
    types = [
        _object(
            "Query",
            [
                _field(
                    "container",
                    _non_null(_named("OBJECT", "Container")),
                    args=[_arg("platform", _named("SCALAR", "Platform"))],
                ),
                _field("version", _non_null(string)),
            ],
        ),
        _object(
            "Container",
            [
                _field("id", _non_null(_named("SCALAR", "ID"))),
                _field(
                    "withExec",
                    _non_null(_named("OBJECT", "Container")),
                    args=[
                        _arg("args", _non_null(_list(_non_null(string)))),
                        _arg("opts", _named("INPUT_OBJECT", "ExecOpts")),
                    ],
                    description="Execute a command in the container.",
                ),
                _field("stdout", string),
                _field("status", _named("ENUM", "Status")),
            ],
            description="An OCI-compatible container.",
        ),
        {
            "kind": "INPUT_OBJECT",
            "name": "ExecOpts",
            "description": None,
            "fields": None,
            "inputFields": [
                _arg("insecure", _named("SCALAR", "Boolean")),
                _arg("retries", _non_null(_named("SCALAR", "Int"))),
            ],
            "interfaces": None,
            "enumValues": None,
            "possibleTypes": None,
        },
        {
            "kind": "ENUM",
            "name": "Status",
            "description": "Lifecycle state.",
            "fields": None,
            "inputFields": None,
            "interfaces": None,
            "enumValues": [
                {
                    "name": "RUNNING",
                    "description": None,
                    "isDeprecated": False,
                    "deprecationReason": None,
                },
                {
                    "name": "EXITED",
                    "description": None,
                    "isDeprecated": False,
                    "deprecationReason": None,
                },
            ],
            "possibleTypes": None,
        },
        {
            "kind": "UNION",
            "name": "Result",
            "description": None,
            "fields": None,
            "inputFields": None,
            "interfaces": None,
            "enumValues": None,
            "possibleTypes": [_named("OBJECT", "Container")],
        },
        {
            "kind": "SCALAR",
            "name": "Platform",
            "description": "Target platform, e.g. linux/amd64.",
            "fields": None,
            "inputFields": None,
            "interfaces": None,
            "enumValues": None,
            "possibleTypes": None,
        },
    ]
    for scalar in ("String", "ID", "Int", "Boolean"):
        types.append(
            {
                "kind": "SCALAR",
                "name": scalar,
                "description": None,
                "fields": None,
                "inputFields": None,
                "interfaces": None,
                "enumValues": None,
                "possibleTypes": None,
            }
        )
    types.append(_object("__Schema", [_field("description", string)]))

    return {
        "__schemaVersion": SCHEMA_VERSION,
        "__schema": {
            "queryType": {"name": "Query"},
            "mutationType": None,
            "subscriptionType": None,
            "types": types,
        },
    }


class MemoryTarget(OverlayTarget):
    """In-memory overlay target that records every write."""

    def __init__(self, files: Optional[Dict[str, bytes]] = None, dirs=()):
        self.files: Dict[str, bytes] = dict(files or {})
        self.dirs = set(dirs)
        self.writes: List[str] = []
        self.mkdirs: List[str] = []

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.dirs

    def read_bytes(self, path: str) -> Optional[bytes]:
        return self.files.get(path)

    def write_bytes(self, path: str, content: bytes) -> None:
        self.writes.append(path)
        self.files[path] = content

    def makedirs(self, path: str) -> None:
        self.mkdirs.append(path)
        self.dirs.add(path)


class ScriptedGenerator(Generator):
    """Generator that replays a fixed list of states, one per pass."""

    def __init__(self, config: GenerationConfig, states: List[GeneratedState]):
        super().__init__(config)
        self.states = list(states)
        self.calls: List[str] = []

    @property
    def language_name(self) -> str:
        return "scripted"

    @property
    def file_extension(self) -> str:
        return ".txt"

    def _next(self, mode: str) -> GeneratedState:
        self.calls.append(mode)
        state = self.states[min(len(self.calls), len(self.states)) - 1]
        if isinstance(state, Exception):
            raise state
        return state

    def generate_module(self, schema: Schema, schema_version: str) -> GeneratedState:
        return self._next("module")

    def generate_client(self, schema: Schema, schema_version: str) -> GeneratedState:
        return self._next("client")


@pytest.fixture
def introspection_data() -> Dict[str, Any]:
    return build_introspection_data()


@pytest.fixture
def introspection_json(introspection_data: Dict[str, Any]) -> str:
    return json.dumps({"data": introspection_data})


@pytest.fixture
def schema(introspection_data: Dict[str, Any]) -> Schema:
    parsed, _ = parse_introspection_response(introspection_data)
    set_schema_parents(parsed)
    return parsed


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def make_config(output_dir: Path):
    """Factory for GenerationConfig values rooted in the test output directory."""

    def _make(**overrides: Any) -> GenerationConfig:
        values: Dict[str, Any] = {
            "lang": "go",
            "output_dir": str(output_dir),
            "module_name": "my-module",
        }
        values.update(overrides)
        return GenerationConfig(**values)

    return _make
