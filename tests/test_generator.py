"""
End-to-end tests for the generation pipeline.

Each scenario generates into a fresh tmp_path and inspects the resulting
source tree:
    - Scenario A: defaults (session layer in the fixt11 package)
    - Scenario B: session layer excluded
    - Scenario C: Message base class with StandardHeader / StandardTrailer
    - Idempotence: identical input gives byte-identical output
"""

import pytest
from qfjgen.config import GeneratorConfig
from qfjgen.examples import build_example_repository
from qfjgen.generator import generate, generate_from_file
from qfjgen.indexer import SchemaIntegrityWarning
from qfjgen.model import (
    Component,
    ComponentRef,
    Field,
    FieldRef,
    GroupRef,
    Group,
    Message,
    Repository,
)
from qfjgen.serialization import repository_to_yaml

EXCLUDE_SESSION = GeneratorConfig(exclude_session_layer=True, emit_dedicated_session_package=False)


def build_minimal_repository() -> Repository:
    """One application message using field 1, one session message using field 2."""
    return Repository(
        name="FIX.Latest",
        version="FIX.Latest",
        fields=[
            Field(1, "AppField", "String"),
            Field(2, "SessionField", "String"),
            Field(8, "BeginString", "String"),
            Field(10, "CheckSum", "String"),
            Field(627, "NoHops", "NumInGroup"),
            Field(628, "HopCompID", "String"),
            Field(384, "NoMsgTypes", "NumInGroup"),
            Field(372, "RefMsgType", "String"),
        ],
        components=[
            Component(1024, "StandardHeader", [FieldRef(8), GroupRef(2085)]),
            Component(1025, "StandardTrailer", [FieldRef(10)]),
        ],
        groups=[
            Group(2085, "HopGrp", 627, [FieldRef(628)]),
            Group(2098, "MsgTypeGrp", 384, [FieldRef(372)]),
        ],
        messages=[
            Message("AppMsg", "U1", "Common", members=[
                ComponentRef(1024), FieldRef(1), ComponentRef(1025),
            ]),
            Message("SessionMsg", "U2", "Session", members=[
                ComponentRef(1024), FieldRef(2), GroupRef(2098), ComponentRef(1025),
            ]),
        ],
    )


def tree(root):
    """Relative path → bytes for every generated file."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*.java"))
    }


class TestScenarioDefaults:

    def test_field_artifacts(self, tmp_path):
        generate(build_minimal_repository(), tmp_path)
        assert (tmp_path / "quickfix/field/AppField.java").is_file()
        assert (tmp_path / "quickfix/field/SessionField.java").is_file()

    def test_session_message_in_dedicated_package(self, tmp_path):
        generate(build_minimal_repository(), tmp_path)
        assert (tmp_path / "quickfix/fixt11/SessionMsg.java").is_file()
        assert not (tmp_path / "quickfix/fixlatest/SessionMsg.java").exists()
        assert (tmp_path / "quickfix/fixlatest/AppMsg.java").is_file()

    def test_no_session_groups_in_application_components(self, tmp_path):
        generate(build_minimal_repository(), tmp_path)
        app_components = tmp_path / "quickfix/fixlatest/component"
        assert not list(app_components.glob("HopGrp.java"))
        assert not list(app_components.glob("MsgTypeGrp.java"))
        assert (tmp_path / "quickfix/fixt11/component/HopGrp.java").is_file()

    def test_shared_application_package_when_not_dedicated(self, tmp_path):
        generate(build_minimal_repository(), tmp_path, GeneratorConfig(emit_dedicated_session_package=False))
        assert (tmp_path / "quickfix/fixlatest/SessionMsg.java").is_file()
        assert (tmp_path / "quickfix/fixlatest/component/MsgTypeGrp.java").is_file()
        assert not (tmp_path / "quickfix/fixt11").exists()

    def test_report(self, tmp_path):
        report = generate(build_minimal_repository(), tmp_path)
        assert report.output_dir == tmp_path
        assert report.artifact_counts["field"] == 8
        assert report.artifact_counts["message"] == 2
        assert report.artifact_counts["component"] == 2
        assert report.total_files == sum(report.artifact_counts.values())
        assert all(path.is_file() for path in report.written_files)
        assert report.warnings == []


class TestScenarioSessionExcluded:

    def test_no_session_messages(self, tmp_path):
        generate(build_minimal_repository(), tmp_path, EXCLUDE_SESSION)
        assert not list(tmp_path.rglob("SessionMsg.java"))
        assert (tmp_path / "quickfix/fixlatest/AppMsg.java").is_file()

    def test_no_session_fields(self, tmp_path):
        generate(build_minimal_repository(), tmp_path, EXCLUDE_SESSION)
        assert not list(tmp_path.rglob("SessionField.java"))
        assert (tmp_path / "quickfix/field/AppField.java").is_file()

    def test_no_session_groups(self, tmp_path):
        generate(build_minimal_repository(), tmp_path, EXCLUDE_SESSION)
        assert not list(tmp_path.rglob("HopGrp.java"))
        assert not list(tmp_path.rglob("MsgTypeGrp.java"))

    def test_example_repository(self, tmp_path):
        report = generate(build_example_repository(), tmp_path, EXCLUDE_SESSION)
        names = {path.name for path in report.written_files}
        assert "Text.java" not in names
        assert "Logon.java" not in names
        assert "NewOrderSingle.java" in names
        assert not (tmp_path / "quickfix/fixt11").exists()


class TestScenarioBaseMessageClass:

    def test_base_class_and_header_trailer(self, tmp_path):
        generate(build_minimal_repository(), tmp_path, GeneratorConfig(emit_base_message_class=True))
        assert len(list(tmp_path.rglob("Message.java"))) == 1
        base = (tmp_path / "quickfix/fixlatest/Message.java").read_text(encoding="utf-8")
        assert "extends quickfix.Message" in base
        for name in ("StandardHeader", "StandardTrailer"):
            source = (tmp_path / f"quickfix/fixlatest/component/{name}.java").read_text(encoding="utf-8")
            assert "public void set(quickfix.field." in source

    def test_without_base_class(self, tmp_path):
        generate(build_minimal_repository(), tmp_path)
        assert not list(tmp_path.rglob("Message.java"))
        assert not list(tmp_path.rglob("StandardHeader.java"))
        assert not list(tmp_path.rglob("StandardTrailer.java"))


class TestIdempotence:

    def test_byte_identical_output(self, tmp_path):
        first, second = tmp_path / "first", tmp_path / "second"
        generate(build_example_repository(), first)
        generate(build_example_repository(), second)
        assert tree(first) == tree(second)
        assert len(tree(first)) > 0

    def test_regenerate_in_place(self, tmp_path):
        generate(build_example_repository(), tmp_path)
        before = tree(tmp_path)
        generate(build_example_repository(), tmp_path)
        assert tree(tmp_path) == before


class TestGeneratorErrors:

    def test_missing_references_reported_not_fatal(self, tmp_path):
        repository = Repository(
            version="FIX.4.4",
            fields=[Field(1, "Account", "String")],
            messages=[Message("M", "M", members=[FieldRef(1), GroupRef(9999)])],
        )
        with pytest.warns(SchemaIntegrityWarning):
            report = generate(repository, tmp_path)
        assert (tmp_path / "quickfix/fix44/M.java").is_file()
        assert any("id=9999" in w for w in report.warnings)

    def test_unwritable_output(self, tmp_path):
        blocked = tmp_path / "blocked"
        blocked.write_text("", encoding="utf-8")
        with pytest.raises(OSError):
            generate(build_minimal_repository(), blocked)


def test_generate_from_file(tmp_path):
    source = tmp_path / "repository.yaml"
    source.write_text(repository_to_yaml(build_example_repository()), encoding="utf-8")
    report = generate_from_file(source, tmp_path / "out")
    assert report.version == "FIX.Latest_EP269"
    assert (tmp_path / "out/quickfix/fixlatest/MessageCracker.java").is_file()
