from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from fluentmock_gen.codegen import GenerationResult, generate_from_descriptors

SETTER_RE = re.compile(r"public \w+Builder Set\w+")


class DocumentBuilder:
    """Fluent helper for writing descriptor documents in tests."""

    def __init__(self, assembly_name: Optional[str] = None) -> None:
        self.assembly_name = assembly_name
        self.types: List[Dict[str, Any]] = []
        self.targets: List[Any] = []

    def interface(
        self,
        name: str,
        *members: Dict[str, Any],
        namespace: str = "Sample",
        interfaces: Optional[List[str]] = None,
        target: bool = True,
        ignore: Optional[List[str]] = None,
    ) -> "DocumentBuilder":
        self.types.append(
            {
                "namespace": namespace,
                "name": name,
                "kind": "interface",
                "interfaces": list(interfaces or []),
                "members": list(members),
            }
        )
        if target:
            full_name = f"{namespace}.{name}" if namespace else name
            self.targets.append({"type": full_name, "ignore": ignore} if ignore else full_name)
        return self

    def declare(self, raw: Dict[str, Any]) -> "DocumentBuilder":
        self.types.append(raw)
        return self

    def build(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {"types": self.types, "targets": self.targets}
        if self.assembly_name:
            document["assembly_name"] = self.assembly_name
        return document


def prop(name: str, type_: str, writable: bool = False) -> Dict[str, Any]:
    return {"kind": "property", "name": name, "type": type_, "writable": writable}


def method(name: str, returns: str = "void", *parameters: Dict[str, Any], **extra: Any) -> Dict[str, Any]:
    return {"kind": "method", "name": name, "returns": returns, "parameters": list(parameters), **extra}


def param(name: str, type_: str, mode: str = "value") -> Dict[str, Any]:
    return {"name": name, "type": type_, "mode": mode}


@pytest.fixture
def document_builder() -> Callable[..., DocumentBuilder]:
    """Factory for empty document builders."""
    return DocumentBuilder


@pytest.fixture
def members():
    """The member helpers as a namespace: ``members.prop(...)`` etc."""

    class _Members:
        pass

    helpers = _Members()
    helpers.prop = prop
    helpers.method = method
    helpers.param = param
    return helpers


@pytest.fixture
def sample_document() -> Dict[str, Any]:
    """A batch exercising every setter family."""
    doc = DocumentBuilder()
    doc.interface("IEmpty")
    doc.interface("IName", prop("Name", "string"))
    doc.interface("IAddress", prop("Street", "string"))
    doc.interface("INested", prop("Address", "IAddress"))
    doc.interface("IWithSequence", prop("Tags", "System.Collections.Generic.IReadOnlyList<string>"))
    doc.interface("IContact", prop("Value", "string"), target=False)
    doc.interface("IEmailContact", prop("Email", "string"), interfaces=["IContact"])
    doc.interface("IPhoneContact", prop("Number", "string"), interfaces=["IContact"])
    doc.interface("ISpecialEmailContact", interfaces=["IEmailContact"])
    doc.interface("IPolymorphic", prop("Contact", "IContact"))
    doc.interface("IPolymorphicList", prop("Contacts", "System.Collections.Generic.IEnumerable<IContact>"))
    doc.interface("IPolymorphic2", prop("Contact", "IEmailContact"))
    doc.interface("IInherited", interfaces=["IName"])
    doc.interface(
        "IBufferMethod",
        method("Process", "void", param("data", "System.ReadOnlySpan<byte>")),
    )
    doc.interface("IBuffer", prop("Data", "System.ReadOnlySpan<char>"), prop("Id", "int"))
    doc.interface(
        "IService",
        method("Compute", "int", param("x", "int"), param("s", "string", "ref")),
        method("Reset"),
    )
    return doc.build()


@pytest.fixture
def generate() -> Callable[..., GenerationResult]:
    """Run a full generation pass and fail loudly if it did not succeed."""

    def _generate(document: Dict[str, Any], config: Any = None) -> GenerationResult:
        result = generate_from_descriptors(document, "moq", config)
        assert result.success, result.error_message
        return result

    return _generate


@pytest.fixture
def count_setters() -> Callable[[str], int]:
    return lambda source: len(SETTER_RE.findall(source))


@pytest.fixture
def document_file(tmp_path: Path, sample_document: Dict[str, Any]) -> Path:
    path = tmp_path / "types.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    return path
