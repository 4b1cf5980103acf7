"""Tests for the Moq builder generator."""

from __future__ import annotations

import re

import pytest

from fluentmock_gen.codegen import generate_from_descriptors, load_descriptors
from fluentmock_gen.codegen.core.config import GeneratorConfig
from fluentmock_gen.codegen.languages.csharp import CSharpMoqGenerator


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("Sample.IEmpty", 0),
        ("Sample.IName", 1),
        ("Sample.IWithSequence", 3),
        ("Sample.INested", 3),
        # IEmailContact, IPhoneContact and (transitively) ISpecialEmailContact
        ("Sample.IPolymorphic", 7),
        ("Sample.IPolymorphicList", 3),
        ("Sample.IPolymorphic2", 5),
        ("Sample.IInherited", 1),
        ("Sample.IBufferMethod", 0),
        ("Sample.IBuffer", 3),
        ("Sample.IService", 2),
    ],
)
def test_setter_counts(sample_document, generate, count_setters, target, expected) -> None:
    result = generate(sample_document)

    assert count_setters(result.sources[target]) == expected


def test_support_blobs_come_first(sample_document, generate) -> None:
    result = generate(sample_document)
    names = list(result.sources)

    assert names[:4] == ["IBuilder", "ListBuilder", "MoqSettings", "ISubstitute"]
    assert names[4] == "Sample.IEmpty"


def test_substitute_contract_only_with_buffers(document_builder, members, generate) -> None:
    doc = document_builder().interface("IName", members.prop("Name", "string")).build()

    result = generate(doc)

    assert "ISubstitute" not in result.sources
    assert "__Substitute" not in result.sources["Sample.IName"]
    assert result.metadata["facade_count"] == 0


def test_generation_is_deterministic(sample_document) -> None:
    first = generate_from_descriptors(sample_document)
    second = generate_from_descriptors(sample_document)

    assert first.sources == second.sources


def test_builder_names_are_stable_across_batches(document_builder, members, generate) -> None:
    small = document_builder().interface("IName", members.prop("Name", "string")).build()
    large = (
        document_builder()
        .interface("IOther", members.prop("Value", "int"))
        .interface("IName", members.prop("Name", "string"))
        .build()
    )

    assert generate(small).sources["Sample.IName"] == generate(large).sources["Sample.IName"]


def test_builder_name_is_shared_by_every_reference(document_builder, members, generate) -> None:
    doc = (
        document_builder()
        .interface("IUser", members.prop("Name", "string"))
        .interface(
            "IGroup",
            members.prop("Owner", "IUser"),
            members.prop("Members", "System.Collections.Generic.IReadOnlyList<IUser>"),
        )
        .build()
    )

    sources = generate(doc).sources
    references = re.findall(r"[\w.:]*UserBuilder\b", sources["Sample.IGroup"])

    assert "public class UserBuilder" in sources["Sample.IUser"]
    assert len(references) >= 3
    assert set(references) == {"global::Sample.FluentMock.UserBuilder"}



def test_builder_shape(sample_document, generate) -> None:
    source = generate(sample_document).sources["Sample.IName"]

    assert "namespace Sample.FluentMock" in source
    assert "public class NameBuilder : global::FluentMock.IBuilder<global::Sample.IName>" in source
    assert "private readonly global::Moq.Mock<global::Sample.IName> _mock;" in source
    assert "public NameBuilder() : this(global::FluentMock.MoqSettings.DefaultMockBehavior)" in source
    assert "public global::Sample.IName Build() => _mock.Object;" in source
    assert "public global::Sample.FluentMock.NameBuilder Setup(" in source
    assert "_mock.Setup(x => x.Name).Returns(value);" in source
    assert (
        "public static global::Sample.IName Build(global::System.Action<NameBuilder> buildAction)"
        in source
    )


def test_nested_setters_delegate_to_target_builder(sample_document, generate) -> None:
    source = generate(sample_document).sources["Sample.INested"]

    assert "public NestedBuilder SetAddress(global::Sample.IAddress value)" in source
    assert (
        "public NestedBuilder SetAddress(global::System.Action<global::Sample.FluentMock.AddressBuilder> buildAction)"
        in source
    )
    assert "return SetAddress(global::Sample.FluentMock.AddressBuilder.Build(behavior, buildAction));" in source


def test_polymorphic_setters_are_generic(sample_document, generate) -> None:
    source = generate(sample_document).sources["Sample.IPolymorphic2"]

    # exact match first, then implementers
    exact = source.index("SetContact(global::System.Action<global::Sample.FluentMock.EmailContactBuilder>")
    derived = source.index("SetContact<T>(global::System.Action<global::Sample.FluentMock.SpecialEmailContactBuilder>")
    assert exact < derived
    assert "where T : class, global::Sample.ISpecialEmailContact" in source


def test_sequence_setters(sample_document, generate) -> None:
    source = generate(sample_document).sources["Sample.IWithSequence"]

    assert "public WithSequenceBuilder SetTags(params string[] values)" in source
    assert "return SetTags(values as global::System.Collections.Generic.IReadOnlyList<string>);" in source
    assert "global::FluentMock.ListBuilder<string>" in source


def test_polymorphic_sequence_uses_plain_list_builder(document_builder, members, generate, count_setters) -> None:
    doc = (
        document_builder()
        .interface("IAnimal", members.prop("Name", "string"), target=False)
        .interface("IDog", interfaces=["IAnimal"])
        .interface("ICat", interfaces=["IAnimal"])
        .interface("IOwner", members.prop("Pets", "System.Collections.Generic.IEnumerable<IAnimal>"))
        .build()
    )

    source = generate(doc).sources["Sample.IOwner"]

    assert count_setters(source) == 3
    assert (
        "public OwnerBuilder SetPets(global::System.Action<global::FluentMock.ListBuilder<global::Sample.IAnimal>> buildAction)"
        in source
    )
    assert "DogBuilder" not in source
    assert "CatBuilder" not in source


def test_sequence_of_batch_member_uses_typed_list_builder(document_builder, members, generate, count_setters) -> None:
    doc = (
        document_builder()
        .interface("IContact", members.prop("Value", "string"))
        .interface("IEmailContact", interfaces=["IContact"])
        .interface("IBook", members.prop("Contacts", "System.Collections.Generic.IReadOnlyList<IContact>"))
        .build()
    )

    source = generate(doc).sources["Sample.IBook"]

    assert count_setters(source) == 3
    assert "global::FluentMock.ListBuilder<global::Sample.IContact, global::Sample.FluentMock.ContactBuilder>" in source
    assert "EmailContactBuilder" not in source


def test_behavioral_setters(sample_document, generate) -> None:
    source = generate(sample_document).sources["Sample.IService"]

    assert "public delegate int _ComputeDelegate(int x, ref string s);" in source
    assert (
        "_mock.Setup(x => x.Compute(global::Moq.It.IsAny<int>(), ref global::Moq.It.Ref<string>.IsAny))"
        ".Returns(method);" in source
    )
    assert "public delegate void _ResetDelegate();" in source
    assert "_mock.Setup(x => x.Reset()).Callback(method);" in source


def test_out_and_in_parameters_use_ref_matchers(document_builder, members, generate) -> None:
    doc = (
        document_builder()
        .interface(
            "ICache",
            members.method(
                "TryGet", "bool", members.param("key", "string"), members.param("value", "int", "out")
            ),
            members.method("Measure", "void", members.param("point", "double", "in")),
        )
        .build()
    )

    source = generate(doc).sources["Sample.ICache"]

    assert "public delegate bool _TryGetDelegate(string key, out int value);" in source
    assert (
        "_mock.Setup(x => x.TryGet(global::Moq.It.IsAny<string>(), out global::Moq.It.Ref<int>.IsAny))"
        ".Returns(method);" in source
    )
    assert "public delegate void _MeasureDelegate(in double point);" in source
    assert "_mock.Setup(x => x.Measure(in global::Moq.It.Ref<double>.IsAny)).Callback(method);" in source



def test_overloaded_methods_get_distinct_delegates(document_builder, members, generate) -> None:
    doc = (
        document_builder()
        .interface(
            "IRunner",
            members.method("Run", "void", members.param("value", "int")),
            members.method("Run", "void", members.param("value", "string")),
        )
        .build()
    )

    source = generate(doc).sources["Sample.IRunner"]

    assert "_RunDelegate(int value);" in source
    assert "_RunDelegate1(string value);" in source


def test_buffer_facade(sample_document, generate) -> None:
    source = generate(sample_document).sources["Sample.IBuffer"]

    assert "public interface __ISubstitute" in source
    assert "char[] Data { get; }" in source
    assert "private class __Substitute : global::Sample.IBuffer, global::FluentMock.ISubstitute" in source
    assert "new global::System.ReadOnlySpan<char>(_substituteMock.Object.Data)" in source
    assert "public int Id => _objectMock.Object.Id;" in source
    assert "public global::Sample.IBuffer Build() => new __Substitute(_substituteMock, _mock);" in source
    assert "_substituteMock.Setup(x => x.Data).Returns(value);" in source
    assert "return SetData(value.ToCharArray());" in source


def test_facade_forwards_ignored_members(document_builder, members, generate) -> None:
    doc = (
        document_builder()
        .interface(
            "IPacket",
            members.prop("Payload", "System.Span<byte>"),
            members.prop("Label", "string", writable=True),
            members.method("Read", "int", members.param("count", "int", "out")),
            ignore=["Label"],
        )
        .build()
    )

    source = generate(doc).sources["Sample.IPacket"]

    assert "SetLabel" not in source
    assert "get => _objectMock.Object.Label;" in source
    assert "set => _objectMock.Object.Label = value;" in source
    assert "public int Read(out int count) => _objectMock.Object.Read(out count);" in source


def test_inherited_members_are_flattened(sample_document, generate) -> None:
    source = generate(sample_document).sources["Sample.IInherited"]

    assert "public InheritedBuilder SetName(string value)" in source


def test_namespace_prefix_from_assembly_name(document_builder, members, generate) -> None:
    doc = document_builder(assembly_name="MyApp").interface("IName", members.prop("Name", "string")).build()

    result = generate(doc)

    assert "namespace MyApp.FluentMock" in result.sources["MoqSettings"]
    assert "global::MyApp.FluentMock.IBuilder<global::Sample.IName>" in result.sources["Sample.IName"]
    assert "namespace Sample.FluentMock" in result.sources["Sample.IName"]


def test_configured_prefix_wins_over_assembly_name(document_builder, members, generate) -> None:
    doc = document_builder(assembly_name="MyApp").interface("IName", members.prop("Name", "string")).build()

    result = generate(doc, {"namespace_prefix": "Tests"})

    assert result.metadata["support_namespace"] == "Tests.FluentMock"


def test_default_mock_behavior(document_builder, members, generate) -> None:
    doc = document_builder().interface("IName", members.prop("Name", "string")).build()

    strict = generate(doc).sources["MoqSettings"]
    loose = generate(doc, {"default_mock_behavior": "loose"}).sources["MoqSettings"]

    assert "DefaultMockBehavior = global::Moq.MockBehavior.Strict;" in strict
    assert "DefaultMockBehavior = global::Moq.MockBehavior.Loose;" in loose


def test_headers_follow_config(document_builder, members, generate) -> None:
    doc = document_builder().interface("IName", members.prop("Name", "string")).build()

    plain = generate(doc, {"add_comments": False, "nullable_context": False}).sources["Sample.IName"]
    default = generate(doc).sources["Sample.IName"]

    assert default.startswith("// <auto-generated />")
    assert "#nullable enable" in default
    assert plain.startswith("namespace Sample.FluentMock")


def test_tab_indentation_applies_to_support_blobs(document_builder, members, generate) -> None:
    doc = document_builder().interface("IName", members.prop("Name", "string")).build()

    result = generate(doc, {"use_tabs": True})

    assert "\n\tpublic interface IBuilder<out T>" in result.sources["IBuilder"]
    assert "\n\tpublic class NameBuilder" in result.sources["Sample.IName"]


def test_unforwardable_members_are_reported(document_builder, members, generate) -> None:
    doc = (
        document_builder()
        .interface(
            "IStream",
            members.prop("Buffer", "System.Span<byte>"),
            {"kind": "event", "name": "Changed"},
        )
        .build()
    )

    result = generate(doc)

    assert any("IStream.Changed" in warning for warning in result.warnings)


def test_empty_batch_warns(generate) -> None:
    result = generate({"types": [], "targets": []})

    assert "No targets to generate" in result.warnings
    assert list(result.sources) == ["IBuilder", "ListBuilder", "MoqSettings"]


@pytest.mark.parametrize(
    ("config", "fragment"),
    [
        ({"generated_namespace": "My Mocks"}, "Invalid generated_namespace"),
        ({"builder_suffix": "Builder!"}, "Invalid builder_suffix"),
    ],
)
def test_invalid_config_values_are_reported(document_builder, members, generate, config, fragment) -> None:
    doc = document_builder().interface("IName", members.prop("Name", "string")).build()

    result = generate(doc, config)

    assert any(fragment in warning for warning in result.warnings)


def test_valid_config_adds_no_warnings(document_builder, members, generate) -> None:
    doc = document_builder().interface("IName", members.prop("Name", "string")).build()

    assert generate(doc, {"namespace_prefix": "MyTests"}).warnings == []


def test_metadata(sample_document, generate) -> None:
    metadata = generate(sample_document).metadata

    assert metadata["language"] == "moq"
    assert metadata["file_extension"] == ".g.cs"
    assert metadata["target_count"] == 15
    assert metadata["file_count"] == 19
    assert metadata["facade_count"] == 1
    assert "Sample.FluentMock.NameBuilder" in metadata["builders"]


def test_generate_single_target(sample_document) -> None:
    descriptors = load_descriptors(sample_document)
    generator = CSharpMoqGenerator(GeneratorConfig())
    target = descriptors.batch.targets[1]

    source = generator.generate_single_target(target, descriptors.batch)

    assert "public class NameBuilder" in source


def test_format_code_collapses_blank_lines() -> None:
    generator = CSharpMoqGenerator(GeneratorConfig())

    assert generator.format_code("a  \n\n\n\nb\n\n") == "a\n\nb\n"


def test_generation_failure_is_captured(sample_document) -> None:
    result = generate_from_descriptors(sample_document, config={"default_mock_behavior": "sometimes"})

    assert not result.success
    assert "Invalid mock behavior" in result.error_message


def test_polymorphic_with_two_implementers(document_builder, members, generate, count_setters) -> None:
    doc = (
        document_builder()
        .interface("IShape", members.prop("Area", "double"), target=False)
        .interface("ICircle", members.prop("Radius", "double"), interfaces=["IShape"])
        .interface("ISquare", members.prop("Side", "double"), interfaces=["IShape"])
        .interface("IDrawing", members.prop("Shape", "IShape"))
        .build()
    )

    source = generate(doc).sources["Sample.IDrawing"]

    assert count_setters(source) == 5
    assert source.count("where T : class, global::Sample.ICircle") == 2
    assert source.count("where T : class, global::Sample.ISquare") == 2


def test_mutually_referencing_targets(document_builder, members, generate) -> None:
    doc = (
        document_builder()
        .interface("IParent", members.prop("Child", "IChild"))
        .interface("IChild", members.prop("Parent", "IParent"))
        .build()
    )

    result = generate(doc)

    assert "global::Sample.FluentMock.ChildBuilder.Build(buildAction)" in result.sources["Sample.IParent"]
    assert "global::Sample.FluentMock.ParentBuilder.Build(buildAction)" in result.sources["Sample.IChild"]
