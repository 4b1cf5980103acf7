"""Tests for the Jinja2 template engine wrapper."""

from __future__ import annotations

from pathlib import Path

import pytest

from fluentmock_gen.codegen.core.templates import TemplateError, create_template_engine

CSHARP_TEMPLATES = (
    Path(__file__).resolve().parents[1] / "fluentmock_gen" / "codegen" / "languages" / "csharp" / "templates"
)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    (tmp_path / "demo.j2").write_text("{{ name }} x => x\n", encoding="utf-8")
    (tmp_path / "strict.j2").write_text("{{ missing }}", encoding="utf-8")
    return tmp_path


def test_output_is_not_html_escaped(template_dir: Path) -> None:
    engine = create_template_engine(template_dir)

    rendered = engine.render_template("demo.j2", {"name": "IBuilder<T> & co"})

    assert rendered == "IBuilder<T> & co x => x\n"


def test_undefined_variables_raise(template_dir: Path) -> None:
    engine = create_template_engine(template_dir)

    with pytest.raises(TemplateError):
        engine.render_template("strict.j2", {})


def test_missing_template_raises() -> None:
    with pytest.raises(TemplateError):
        create_template_engine().render_template("nope.j2", {})


def test_shipped_templates() -> None:
    engine = create_template_engine(CSHARP_TEMPLATES)

    rendered = engine.render_template(
        "MoqSettings.cs.j2",
        {"namespace": "App.FluentMock", "mock_behavior": "Loose", "add_comments": False, "nullable_context": False},
    )
    assert rendered.startswith("namespace App.FluentMock\n{")
    assert "global::Moq.MockBehavior.Loose;" in rendered
