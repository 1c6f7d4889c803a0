"""Pytest fixtures for mrgtool tests."""

from pathlib import Path
from typing import Dict, List, Sequence

import pytest

from mrgtool.glossary.exceptions import TermResolutionError
from mrgtool.glossary.models import (
    ScopeConfig,
    ScopeInfo,
    ScopeRef,
    TermCollection,
    VersionRecord,
)


class StubInterpreter:
    """Interpreter returning canned collections keyed by the first instruction."""

    def __init__(self, collections: Dict[str, TermCollection]):
        self.collections = collections
        self.calls: List[tuple] = []

    def interpret(self, instructions: Sequence[str]) -> TermCollection:
        self.calls.append(tuple(instructions))
        key = instructions[0] if instructions else ""
        if key not in self.collections:
            raise TermResolutionError(f"no canned collection for '{key}'")
        canned = self.collections[key]
        return TermCollection(
            scopes=list(canned.scopes),
            entries=[dict(entry) for entry in canned.entries],
        )


def make_config(
    root: Path,
    versions: Sequence[VersionRecord] = (),
    scopes: Sequence[ScopeRef] = (),
    defaultvsn: str = "",
    scopetag: str = "demo",
) -> ScopeConfig:
    """Build a ScopeConfig rooted at ``root``."""
    return ScopeConfig(
        scope=ScopeInfo(
            scopetag=scopetag,
            scopedir="https://example.org/demo",
            curatedir="terms",
            glossarydir="glossaries",
            defaultvsn=defaultvsn,
            localscopedir=root,
        ),
        scopes=tuple(scopes),
        versions=tuple(versions),
    )


def write_ctext(curated_dir: Path, name: str, frontmatter: str, body: str = "Body text.\n") -> Path:
    """Write a curated text with the given front matter."""
    curated_dir.mkdir(parents=True, exist_ok=True)
    ctext = curated_dir / name
    ctext.write_text(f"---\n{frontmatter}---\n\n{body}", encoding="utf-8")
    return ctext


@pytest.fixture
def sample_collection():
    """Collection with unsorted entries, a duplicate term and an unknown scope."""
    return TermCollection(
        scopes=[ScopeRef("demo"), ScopeRef("other"), ScopeRef("x")],
        entries=[
            {"term": "zebra", "scopetag": "demo", "glossaryText": "A striped animal"},
            {"term": "apple", "scopetag": "demo", "glossaryText": "First apple"},
            {"term": "apple", "scopetag": "other", "glossaryText": "Second apple"},
        ],
    )


@pytest.fixture
def sample_config(tmp_path):
    """Scope with two versions, a default version and alt vsntags."""
    return make_config(
        tmp_path,
        versions=[
            VersionRecord("v1", altvsntags=("v1-0", "legacy"), termselcrit=("*",)),
            VersionRecord("v2", altvsntags=("latest",), termselcrit=("*",)),
        ],
        scopes=[ScopeRef("other", "../other")],
        defaultvsn="v2",
    )


@pytest.fixture
def stub_interpreter(sample_collection):
    return StubInterpreter({"*": sample_collection})


@pytest.fixture
def curated_scope(tmp_path):
    """Scope directory with a SAF and three curated texts."""
    root = tmp_path / "demo"
    curated = root / "terms"
    write_ctext(curated, "party.md", "term: party\ngrouptags: [core]\nglossaryText: 'An actor'\n")
    write_ctext(curated, "actor.md", "term: actor\ngrouptags: core, roles\nglossaryText: 'Someone acting'\n")
    write_ctext(curated, "version.md", "term: version\nglossaryText: '1.0'\n")
    (root / "saf.yaml").write_text(
        "scope:\n"
        "  scopetag: demo\n"
        "  scopedir: https://example.org/demo\n"
        "  curatedir: terms\n"
        "  glossarydir: glossaries\n"
        "  defaultvsn: v1\n"
        "scopes:\n"
        "  - scopetag: other\n"
        "    scopedir: ../other\n"
        "versions:\n"
        "  - vsntag: v1\n"
        "    altvsntags: [latest]\n"
        "    termselcrit:\n"
        "      - '*'\n"
        "  - vsntag: v2\n"
        "    termselcrit:\n"
        "      - 'tags[core]'\n"
        "      - '-terms[actor]'\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def config_factory():
    """Factory building ScopeConfig objects (see make_config)."""
    return make_config


@pytest.fixture
def interpreter_factory():
    """Factory building StubInterpreter objects from canned collections."""
    return StubInterpreter


@pytest.fixture
def ctext_writer():
    """Helper writing curated texts (see write_ctext)."""
    return write_ctext
