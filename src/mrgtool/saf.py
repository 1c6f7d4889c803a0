"""Scope Administration File (SAF) loading.

The SAF is the YAML configuration of a scope: its identity, directory
layout, the scopes it refers to, and the versions to generate.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from mrgtool.glossary.exceptions import SafError
from mrgtool.glossary.models import ScopeConfig, ScopeInfo, ScopeRef, VersionRecord

SAF_FILENAME = "saf.yaml"


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _tags(value: Any, path: Path, field: str) -> Tuple[str, ...]:
    """Normalise a scalar-or-list SAF field to a tuple of stripped strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise SafError(path, f"'{field}' must be a string or a list")
    return tuple(_text(item) for item in value if _text(item))


def _parse_scope(data: Any, path: Path, localscopedir: Path) -> ScopeInfo:
    if not isinstance(data, dict):
        raise SafError(path, "missing 'scope' section")
    for key in ("scopetag", "curatedir", "glossarydir"):
        if not _text(data.get(key)):
            raise SafError(path, f"'scope.{key}' is required")
    return ScopeInfo(
        scopetag=_text(data["scopetag"]),
        scopedir=_text(data.get("scopedir")),
        curatedir=_text(data["curatedir"]),
        glossarydir=_text(data["glossarydir"]),
        defaultvsn=_text(data.get("defaultvsn")),
        localscopedir=localscopedir,
    )


def _parse_scopes(data: Any, path: Path) -> Tuple[ScopeRef, ...]:
    if data is None:
        return ()
    if not isinstance(data, list):
        raise SafError(path, "'scopes' must be a list")
    scopes: List[ScopeRef] = []
    for item in data:
        if not isinstance(item, dict) or not _text(item.get("scopetag")):
            raise SafError(path, "every entry in 'scopes' needs a 'scopetag'")
        scopes.append(ScopeRef(scopetag=_text(item["scopetag"]), scopedir=_text(item.get("scopedir"))))
    return tuple(scopes)


def _parse_versions(data: Any, path: Path) -> Tuple[VersionRecord, ...]:
    if data is None:
        return ()
    if not isinstance(data, list):
        raise SafError(path, "'versions' must be a list")
    versions: List[VersionRecord] = []
    seen: set[str] = set()
    for item in data:
        if not isinstance(item, dict) or not _text(item.get("vsntag")):
            raise SafError(path, "every entry in 'versions' needs a 'vsntag'")
        vsntag = _text(item["vsntag"])
        if vsntag in seen:
            raise SafError(path, f"duplicate vsntag '{vsntag}'")
        seen.add(vsntag)
        versions.append(
            VersionRecord(
                vsntag=vsntag,
                altvsntags=_tags(item.get("altvsntags"), path, "altvsntags"),
                termselcrit=_tags(item.get("termselcrit"), path, "termselcrit"),
            )
        )

    # Alt vsntags must never name a canonical MRG file
    for version in versions:
        for altvsntag in version.altvsntags:
            if altvsntag in seen:
                raise SafError(
                    path,
                    f"altvsntag '{altvsntag}' of version '{version.vsntag}' is already a vsntag",
                )
    return tuple(versions)


def parse_saf(data: Any, path: Path, localscopedir: Path) -> ScopeConfig:
    """Build a ScopeConfig from parsed SAF data.

    Raises:
        SafError: If the data does not describe a valid scope
    """
    if not isinstance(data, dict):
        raise SafError(path, "SAF must be a mapping")
    return ScopeConfig(
        scope=_parse_scope(data.get("scope"), path, localscopedir),
        scopes=_parse_scopes(data.get("scopes"), path),
        versions=_parse_versions(data.get("versions"), path),
    )


def load_saf(path: Path, localscopedir: Path | None = None) -> ScopeConfig:
    """Load the SAF at ``path``.

    Args:
        path: SAF file
        localscopedir: Local root directory of the scope. Defaults to the
            directory containing the SAF.

    Raises:
        SafError: If the file is missing, unparseable, or invalid
    """
    path = Path(path)
    if not path.is_file():
        raise SafError(path, "file not found")

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.load(handle)
    except (OSError, YAMLError) as exc:
        raise SafError(path, f"cannot parse: {exc}") from exc

    root = Path(localscopedir) if localscopedir is not None else path.parent
    return parse_saf(data, path, root.resolve())
