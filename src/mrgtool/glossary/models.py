"""Core data models for merged glossary generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

Entry = Dict[str, Any]


@dataclass(frozen=True)
class ScopeRef:
    """Reference to a scope by tag, with its directory if known."""
    scopetag: str
    scopedir: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"scopetag": self.scopetag, "scopedir": self.scopedir}


@dataclass(frozen=True)
class ScopeInfo:
    """Identity and directory layout of the scope being generated."""
    scopetag: str
    curatedir: str
    glossarydir: str
    localscopedir: Path
    scopedir: str = ""
    defaultvsn: str = ""


@dataclass(frozen=True)
class VersionRecord:
    """A named release of a scope's terminology."""
    vsntag: str
    altvsntags: Tuple[str, ...] = ()
    termselcrit: Tuple[str, ...] = ()

    def claims(self, tag: str) -> bool:
        """Return True if ``tag`` is this version's primary or an alt vsntag."""
        return tag == self.vsntag or tag in self.altvsntags


@dataclass(frozen=True)
class ScopeConfig:
    """Everything one run needs to know about the scope being generated.

    Built once from the SAF (see ``mrgtool.saf``) and passed explicitly
    to the resolver and the publisher. Never mutated during a run.
    """
    scope: ScopeInfo
    scopes: Tuple[ScopeRef, ...] = ()
    versions: Tuple[VersionRecord, ...] = ()

    @property
    def scopetag(self) -> str:
        return self.scope.scopetag

    @property
    def defaultvsn(self) -> str:
        return self.scope.defaultvsn

    @property
    def glossary_path(self) -> Path:
        """Directory holding canonical MRG files and their aliases."""
        return Path(self.scope.localscopedir) / self.scope.glossarydir

    @property
    def curated_path(self) -> Path:
        return Path(self.scope.localscopedir) / self.scope.curatedir

    def find_scope(self, scopetag: str) -> Optional[ScopeRef]:
        for ref in self.scopes:
            if ref.scopetag == scopetag:
                return ref
        return None


@dataclass
class Terminology:
    """Header of a merged glossary. Always fully populated."""
    scopetag: str
    scopedir: str
    curatedir: str
    vsntag: str
    altvsntags: List[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "scopetag": self.scopetag,
            "scopedir": self.scopedir,
            "curatedir": self.curatedir,
            "vsntag": self.vsntag,
            "altvsntags": list(self.altvsntags),
        }


@dataclass
class TermCollection:
    """Raw result of interpreting a version's term selection criteria.

    ``scopes`` lists every scope the instructions referred to, in
    first-seen order. Their ``scopedir`` may still be empty; the
    publisher fills it in from the config or drops the scope.
    """
    terminology: Optional[Terminology] = None
    scopes: List[ScopeRef] = field(default_factory=list)
    entries: List[Entry] = field(default_factory=list)

    def add_scope(self, scopetag: str) -> None:
        if all(ref.scopetag != scopetag for ref in self.scopes):
            self.scopes.append(ScopeRef(scopetag))


@dataclass
class MergedGlossary:
    """The MRG document for one version."""
    terminology: Terminology
    scopes: List[ScopeRef] = field(default_factory=list)
    entries: List[Entry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "terminology": self.terminology.to_dict(),
            "scopes": [scope.to_dict() for scope in self.scopes],
            "entries": [dict(entry) for entry in self.entries],
        }


@dataclass
class PublishResult:
    """Outcome of publishing one version."""
    vsntag: str
    canonical: Optional[Path] = None
    aliases: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.canonical is not None and not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "vsntag": self.vsntag,
            "canonical": str(self.canonical) if self.canonical else None,
            "aliases": [str(alias) for alias in self.aliases],
            "errors": list(self.errors),
            "success": self.success,
        }


def mrg_filename(scopetag: str, vsntag: str | None = None) -> str:
    """Return the MRG file name for a scope, optionally for a specific vsntag.

    Examples:
        >>> mrg_filename("demo", "v1")
        'mrg.demo.v1.yaml'
        >>> mrg_filename("demo")
        'mrg.demo.yaml'
    """
    if vsntag:
        return f"mrg.{scopetag}.{vsntag}.yaml"
    return f"mrg.{scopetag}.yaml"
