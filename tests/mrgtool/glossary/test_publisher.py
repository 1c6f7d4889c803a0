"""Tests for GlossaryPublisher: merge, canonical write and alias reconciliation."""

import logging
import os
from unittest.mock import patch

import pytest

from mrgtool.glossary.exceptions import TermResolutionError
from mrgtool.glossary.models import ScopeRef, TermCollection, VersionRecord
from mrgtool.glossary.publisher import GlossaryPublisher, build_terminology, resolve_scopes
from mrgtool.glossary.rendering import load_mrg


def _read(path):
    return load_mrg(path.read_text(encoding="utf-8"))


def test_build_terminology(sample_config):
    terminology = build_terminology(sample_config, sample_config.versions[0])

    assert terminology.to_dict() == {
        "scopetag": "demo",
        "scopedir": "https://example.org/demo",
        "curatedir": "terms",
        "vsntag": "v1",
        "altvsntags": ["v1-0", "legacy"],
    }


def test_resolve_scopes_drops_unknown(sample_config):
    """Scopes missing from the config are dropped; known ones get their scopedir."""
    referenced = [ScopeRef("demo"), ScopeRef("other"), ScopeRef("x")]

    resolved = resolve_scopes(referenced, sample_config)

    assert resolved == [ScopeRef("other", "../other")]
    # Input is left untouched
    assert [s.scopedir for s in referenced] == ["", "", ""]


def test_build_sorts_and_filters(sample_config, stub_interpreter):
    mrg = GlossaryPublisher(sample_config, stub_interpreter).build(sample_config.versions[0])

    assert [(e["term"], e["scopetag"]) for e in mrg.entries] == [
        ("apple", "demo"),
        ("apple", "other"),
        ("zebra", "demo"),
    ]
    assert [s.scopetag for s in mrg.scopes] == ["other"]
    assert stub_interpreter.calls == [("*",)]


def test_publish_writes_canonical_and_alt_aliases(sample_config, stub_interpreter):
    """v1 is not the default: canonical file plus one alias per altvsntag."""
    publisher = GlossaryPublisher(sample_config, stub_interpreter)
    glossary = sample_config.glossary_path

    result = publisher.publish(sample_config.versions[0])

    assert result.success
    assert result.canonical == glossary / "mrg.demo.v1.yaml"
    assert result.aliases == [glossary / "mrg.demo.v1-0.yaml", glossary / "mrg.demo.legacy.yaml"]
    assert not (glossary / "mrg.demo.yaml").exists()

    canonical_text = result.canonical.read_text(encoding="utf-8")
    for alias in result.aliases:
        assert alias.is_symlink()
        assert os.readlink(alias) == "mrg.demo.v1.yaml"
        assert alias.read_text(encoding="utf-8") == canonical_text


def test_publish_output_content(sample_config, stub_interpreter):
    result = GlossaryPublisher(sample_config, stub_interpreter).publish(sample_config.versions[0])

    data = _read(result.canonical)
    assert list(data) == ["terminology", "scopes", "entries"]
    assert data["terminology"]["vsntag"] == "v1"
    assert data["scopes"] == [{"scopetag": "other", "scopedir": "../other"}]
    assert [e["glossaryText"] for e in data["entries"]] == ["First apple", "Second apple", "A striped animal"]


def test_publish_default_alias(sample_config, stub_interpreter):
    """The default version also gets mrg.<scopetag>.yaml."""
    glossary = sample_config.glossary_path

    result = GlossaryPublisher(sample_config, stub_interpreter).publish(sample_config.versions[1])

    assert result.aliases == [glossary / "mrg.demo.yaml", glossary / "mrg.demo.latest.yaml"]
    assert os.readlink(glossary / "mrg.demo.yaml") == "mrg.demo.v2.yaml"


def test_republish_updates_default_alias(sample_config, interpreter_factory):
    """Re-running after the content changed leaves no stale alias."""
    version = sample_config.versions[1]
    first = interpreter_factory({"*": TermCollection(entries=[{"term": "old"}])})
    second = interpreter_factory({"*": TermCollection(entries=[{"term": "new"}])})
    alias = sample_config.glossary_path / "mrg.demo.yaml"

    GlossaryPublisher(sample_config, first).publish(version)
    assert _read(alias)["entries"] == [{"term": "old"}]

    GlossaryPublisher(sample_config, second).publish(version)
    assert _read(alias)["entries"] == [{"term": "new"}]
    assert alias.is_symlink()


def test_publish_replaces_stale_alias_from_other_version(sample_config, stub_interpreter):
    """An alias that pointed at another version's file is repointed."""
    glossary = sample_config.glossary_path
    glossary.mkdir(parents=True)
    (glossary / "mrg.demo.v0.yaml").write_text("stale", encoding="utf-8")
    os.symlink("mrg.demo.v0.yaml", glossary / "mrg.demo.latest.yaml")

    GlossaryPublisher(sample_config, stub_interpreter).publish(sample_config.versions[1])

    assert os.readlink(glossary / "mrg.demo.latest.yaml") == "mrg.demo.v2.yaml"


def test_publish_is_deterministic(sample_config, stub_interpreter):
    publisher = GlossaryPublisher(sample_config, stub_interpreter)
    version = sample_config.versions[0]

    first = publisher.publish(version).canonical.read_bytes()
    second = publisher.publish(version).canonical.read_bytes()

    assert first == second


def test_publish_term_resolution_error(sample_config, interpreter_factory):
    """Interpreter failures propagate as TermResolutionError tagged with the version."""
    publisher = GlossaryPublisher(sample_config, interpreter_factory({}))

    with pytest.raises(TermResolutionError) as exc_info:
        publisher.publish(sample_config.versions[0])

    assert exc_info.value.vsntag == "v1"
    assert not sample_config.glossary_path.exists()


def test_publish_wraps_foreign_interpreter_errors(sample_config):
    class Broken:
        def interpret(self, instructions):
            raise ValueError("bad payload")

    with pytest.raises(TermResolutionError, match="bad payload"):
        GlossaryPublisher(sample_config, Broken()).publish(sample_config.versions[0])


def test_canonical_failure_skips_aliases(sample_config, stub_interpreter):
    """When the canonical write fails no alias is created."""
    with patch("mrgtool.glossary.publisher.write_file", return_value=False):
        with patch("mrgtool.glossary.publisher.ensure_link") as mock_link:
            result = GlossaryPublisher(sample_config, stub_interpreter).publish(sample_config.versions[1])

    mock_link.assert_not_called()
    assert result.canonical is None
    assert result.aliases == []
    assert not result.success
    assert "mrg.demo.v2.yaml" in result.errors[0]


def test_canonical_directory_failure(sample_config, stub_interpreter, caplog):
    """A file blocking the glossary directory is reported as E007."""
    sample_config.glossary_path.write_text("in the way", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        result = GlossaryPublisher(sample_config, stub_interpreter).publish(sample_config.versions[1])

    assert not result.success
    assert "E007" in caplog.text


def test_failed_alias_does_not_stop_other_aliases(sample_config, stub_interpreter):
    """One failing alias is reported; the remaining aliases are still created."""
    glossary = sample_config.glossary_path

    with patch("mrgtool.glossary.publisher.ensure_link", side_effect=[False, True]) as mock_link:
        result = GlossaryPublisher(sample_config, stub_interpreter).publish(sample_config.versions[0])

    assert mock_link.call_count == 2
    assert result.canonical == glossary / "mrg.demo.v1.yaml"
    assert result.aliases == [glossary / "mrg.demo.legacy.yaml"]
    assert len(result.errors) == 1
    assert "mrg.demo.v1-0.yaml" in result.errors[0]


def test_publish_with_default_interpreter(curated_scope):
    """Without an explicit interpreter the curated texts are used."""
    from mrgtool.saf import load_saf

    config = load_saf(curated_scope / "saf.yaml")

    result = GlossaryPublisher(config).publish(config.versions[1])

    assert [e["term"] for e in _read(result.canonical)["entries"]] == ["party"]
    assert result.aliases == []


def test_version_record_not_mutated(sample_config, stub_interpreter):
    version = VersionRecord("v1", altvsntags=("a", "b"), termselcrit=("*",))
    GlossaryPublisher(sample_config, stub_interpreter).publish(version)
    assert version == VersionRecord("v1", altvsntags=("a", "b"), termselcrit=("*",))


@pytest.mark.parametrize(
    "versions",
    [
        [VersionRecord("v1", altvsntags=("v1",), termselcrit=("*",))],
        [
            VersionRecord("v1", termselcrit=("*",)),
            VersionRecord("v2", altvsntags=("v1",), termselcrit=("*",)),
        ],
    ],
    ids=["own-vsntag", "other-vsntag"],
)
def test_alias_never_replaces_canonical_mrg(config_factory, stub_interpreter, tmp_path, versions):
    """An alt vsntag naming a canonical MRG is refused and the MRG survives."""
    config = config_factory(tmp_path, versions=versions)
    publisher = GlossaryPublisher(config, stub_interpreter)
    canonical = config.glossary_path / "mrg.demo.v1.yaml"

    results = [publisher.publish(version) for version in config.versions]

    assert not results[-1].success
    assert results[-1].aliases == []
    assert "mrg.demo.v1.yaml" in results[-1].errors[0]
    assert not canonical.is_symlink()
    assert _read(canonical)["terminology"]["vsntag"] == "v1"


def test_term_resolution_error_message_names_version(sample_config, interpreter_factory):
    with pytest.raises(TermResolutionError) as exc_info:
        GlossaryPublisher(sample_config, interpreter_factory({})).publish(sample_config.versions[0])

    assert "version 'v1'" in str(exc_info.value)
    assert exc_info.value.reason == "no canned collection for '*'"
