"""Term selection criteria interpreter.

Turns the ``termselcrit`` instructions of a version into a raw
``TermCollection``. Instructions are processed in order against a
working list of entries:

    *[@scope[:vsn]]              add every entry of the source
    tags[a, b][@scope[:vsn]]     add entries whose grouptags intersect
    terms[a, b][@scope[:vsn]]    add entries whose term is listed
    -tags[a, b][@scope]          remove working entries with those grouptags
    -terms[a, b][@scope]         remove working entries with those terms

Without a scope qualifier (or with the own scopetag) the source is the
curated texts of the scope being generated. Any other scope is read
from the MRG it published in its local directory.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .exceptions import GlossaryError, TermResolutionError
from .models import Entry, ScopeConfig, TermCollection, mrg_filename
from .rendering import load_mrg

logger = logging.getLogger(__name__)

INSTRUCTION_PATTERN = re.compile(
    r"^(?P<remove>-)?\s*"
    r"(?:(?P<all>\*)|(?P<kind>tags|terms)\[(?P<items>[^\]]*)\])"
    r"\s*(?:@(?P<scopetag>[A-Za-z0-9_-]+)(?::(?P<vsntag>[A-Za-z0-9_.-]+))?)?$"
)


class TermInterpreter(Protocol):
    """Anything that can expand term selection criteria into entries."""

    def interpret(self, instructions: Sequence[str]) -> TermCollection:
        ...


@dataclass(frozen=True)
class Instruction:
    """One parsed term selection instruction."""
    remove: bool
    kind: str  # "all", "tags" or "terms"
    items: Tuple[str, ...] = ()
    scopetag: Optional[str] = None
    vsntag: Optional[str] = None

    def selects(self, entry: Entry) -> bool:
        if self.kind == "all":
            return True
        if self.kind == "terms":
            return str(entry.get("term", "")) in self.items
        return bool(set(entry_grouptags(entry)) & set(self.items))


def parse_instruction(text: str) -> Instruction:
    """Parse a single instruction string.

    Raises:
        TermResolutionError: If the instruction is malformed
    """
    match = INSTRUCTION_PATTERN.match(str(text).strip())
    if match is None:
        raise TermResolutionError(f"malformed instruction '{text}'")

    remove = match.group("remove") is not None
    if match.group("all"):
        if remove:
            raise TermResolutionError(f"'-*' is not a valid instruction ('{text}')")
        return Instruction(
            remove=False,
            kind="all",
            scopetag=match.group("scopetag"),
            vsntag=match.group("vsntag"),
        )

    items = tuple(item.strip() for item in match.group("items").split(",") if item.strip())
    if not items:
        raise TermResolutionError(f"instruction '{text}' lists no {match.group('kind')}")
    if remove and match.group("vsntag"):
        raise TermResolutionError(f"removal instruction '{text}' cannot name a version")
    return Instruction(
        remove=remove,
        kind=match.group("kind"),
        items=items,
        scopetag=match.group("scopetag"),
        vsntag=match.group("vsntag"),
    )


def entry_grouptags(entry: Entry) -> List[str]:
    """Return the grouptags of an entry as a list of strings.

    Curated texts may give grouptags as a list or a comma-separated string.
    """
    raw = entry.get("grouptags")
    if raw is None:
        return []
    if isinstance(raw, str):
        return [tag.strip() for tag in raw.split(",") if tag.strip()]
    if isinstance(raw, Iterable):
        return [str(tag).strip() for tag in raw if str(tag).strip()]
    return [str(raw)]


def parse_frontmatter(content: str) -> Optional[Dict[str, Any]]:
    """Parse YAML front matter from a markdown file.

    Args:
        content: File content

    Returns:
        Front matter dict if present, None otherwise
    """
    if not content.startswith("---"):
        return None

    lines = content.split("\n")
    end_idx = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            end_idx = i
            break

    if end_idx is None:
        return None

    yaml = YAML(typ="safe")
    try:
        data = yaml.load("\n".join(lines[1:end_idx]))
    except YAMLError:
        return None
    return data if isinstance(data, dict) else None


def load_curated_entries(curated_path: Path, scopetag: str) -> List[Entry]:
    """Load one entry per curated text in ``curated_path``.

    Files are read in name order. Each entry is the file's front matter
    plus ``scopetag`` and ``locator`` (the file name).

    Raises:
        TermResolutionError: If the curated directory does not exist
    """
    if not curated_path.is_dir():
        raise TermResolutionError(f"curated directory '{curated_path}' not found")

    entries: List[Entry] = []
    for ctext in sorted(curated_path.glob("*.md")):
        try:
            content = ctext.read_text(encoding="utf-8")
        except OSError as exc:
            raise TermResolutionError(f"cannot read curated text '{ctext}': {exc}") from exc

        frontmatter = parse_frontmatter(content)
        if not frontmatter or not frontmatter.get("term"):
            logger.warning("Skipping curated text '%s': no front matter with a 'term' field", ctext)
            continue

        entry: Entry = dict(frontmatter)
        entry["term"] = str(entry["term"])
        entry["scopetag"] = scopetag
        entry["locator"] = ctext.name
        entries.append(entry)

    logger.debug("Loaded %d curated text(s) from %s", len(entries), curated_path)
    return entries


class TermSelectionInterpreter:
    """Default ``TermInterpreter`` working on local directories only."""

    def __init__(self, config: ScopeConfig):
        self.config = config
        self._sources: Dict[Tuple[str, Optional[str]], List[Entry]] = {}

    def interpret(self, instructions: Sequence[str]) -> TermCollection:
        """Expand instructions into a term collection.

        Raises:
            TermResolutionError: On malformed instructions or unreadable sources
        """
        collection = TermCollection()
        entries: List[Entry] = []
        self._sources = {}

        for text in instructions:
            instruction = parse_instruction(text)
            if instruction.remove:
                entries = [entry for entry in entries if not self._removes(instruction, entry)]
                continue

            scopetag = instruction.scopetag or self.config.scopetag
            collection.add_scope(scopetag)
            seen = {_entry_key(entry) for entry in entries}
            for entry in self._source(scopetag, instruction.vsntag):
                if instruction.selects(entry) and _entry_key(entry) not in seen:
                    entries.append(dict(entry))
                    seen.add(_entry_key(entry))

        collection.entries = entries
        return collection

    def _removes(self, instruction: Instruction, entry: Entry) -> bool:
        if instruction.scopetag and entry.get("scopetag") != instruction.scopetag:
            return False
        return instruction.selects(entry)

    def _source(self, scopetag: str, vsntag: Optional[str]) -> List[Entry]:
        key = (scopetag, vsntag)
        if key not in self._sources:
            if scopetag == self.config.scopetag and vsntag is None:
                self._sources[key] = load_curated_entries(self.config.curated_path, scopetag)
            else:
                self._sources[key] = self._load_scope_mrg(scopetag, vsntag)
        return self._sources[key]

    def _load_scope_mrg(self, scopetag: str, vsntag: Optional[str]) -> List[Entry]:
        from mrgtool.saf import SAF_FILENAME, load_saf

        if scopetag == self.config.scopetag:
            glossary_path = self.config.glossary_path
        else:
            ref = self.config.find_scope(scopetag)
            if ref is None:
                logger.warning(
                    "Scope '%s' is not listed in the SAF of scope '%s'; it contributes no entries",
                    scopetag,
                    self.config.scopetag,
                )
                return []
            if "://" in ref.scopedir:
                raise TermResolutionError(
                    f"scope '{scopetag}' lives at '{ref.scopedir}', only local scopedirs are supported"
                )
            scope_root = Path(self.config.scope.localscopedir) / ref.scopedir
            try:
                other = load_saf(scope_root / SAF_FILENAME)
            except GlossaryError as exc:
                raise TermResolutionError(f"cannot load SAF of scope '{scopetag}': {exc}") from exc
            glossary_path = other.glossary_path

        mrg_path = glossary_path / mrg_filename(scopetag, vsntag)
        try:
            data = load_mrg(mrg_path.read_text(encoding="utf-8"))
        except (OSError, YAMLError) as exc:
            raise TermResolutionError(f"cannot read MRG '{mrg_path}': {exc}") from exc

        raw_entries = data.get("entries") or []
        if not isinstance(raw_entries, list):
            raise TermResolutionError(f"MRG '{mrg_path}' has no entries list")
        return [dict(entry) for entry in raw_entries if isinstance(entry, dict) and "term" in entry]


def _entry_key(entry: Entry) -> Tuple[str, str]:
    return (str(entry.get("term", "")), str(entry.get("scopetag", "")))
