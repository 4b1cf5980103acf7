"""Tests for identifier sanitizing and builder naming."""

from __future__ import annotations

import pytest

from fluentmock_gen.codegen.core.naming import NameSanitizer
from fluentmock_gen.codegen.languages.csharp.naming import (
    builder_name_for,
    create_csharp_sanitizer,
    delegate_name_for,
    escape_identifier,
    setter_name_for,
)


@pytest.mark.parametrize(
    ("type_name", "expected"),
    [
        ("IUser", "UserBuilder"),
        ("Item", "ItemBuilder"),
        ("I", "IBuilder"),
        ("IOStream", "OStreamBuilder"),
        ("Ixyz", "IxyzBuilder"),
    ],
)
def test_builder_name_for(type_name: str, expected: str) -> None:
    assert builder_name_for(type_name) == expected


def test_builder_name_with_custom_affixes() -> None:
    assert builder_name_for("TUser", interface_prefix="T", suffix="Fake") == "UserFake"
    assert builder_name_for("IUser", interface_prefix="", suffix="Builder") == "IUserBuilder"


def test_member_derived_names() -> None:
    assert setter_name_for("Name") == "SetName"
    assert delegate_name_for("Compute") == "_ComputeDelegate"


def test_escape_identifier() -> None:
    assert escape_identifier("event") == "@event"
    assert escape_identifier("value") == "value"


def test_unique_names_get_counters() -> None:
    sanitizer = create_csharp_sanitizer()

    names = [sanitizer.unique_name("_RunDelegate") for _ in range(3)]

    assert names == ["_RunDelegate", "_RunDelegate1", "_RunDelegate2"]


def test_sanitize_escapes_reserved_words() -> None:
    assert create_csharp_sanitizer().sanitize_name("class") == "@class"
    assert NameSanitizer({"class"}).sanitize_name("class") == "class_"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("user-name", "user_name"),
        ("2fast", "_2fast"),
        ("", "value"),
    ],
)
def test_sanitize_name(name: str, expected: str) -> None:
    assert NameSanitizer().sanitize_name(name) == expected


def test_unique_names_are_sanitized_first() -> None:
    sanitizer = create_csharp_sanitizer()

    assert sanitizer.unique_name("event") == "@event"
    assert sanitizer.unique_name("event") == "@event1"


def test_interface_marker_needs_an_uppercase_follower() -> None:
    # Names that merely start with "I" keep it; only the interface marker is dropped.
    assert builder_name_for("Item") == "ItemBuilder"
    assert builder_name_for("Index") == "IndexBuilder"
    assert builder_name_for("IItem") == "ItemBuilder"
