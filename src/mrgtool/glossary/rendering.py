"""Serialization of merged glossaries.

Entries are ordered with a locale-aware collation key and every string
value is written quoted, so identical inputs give byte-identical files
and values such as ``"1.0"`` or ``"yes"`` survive a round trip as strings.
"""

from __future__ import annotations

import io
import unicodedata
from typing import Any, Iterable, List, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.scalarstring import SingleQuotedScalarString

from .models import Entry, MergedGlossary


# Root collation order of punctuation and symbols. All of them sort
# after whitespace and before digits and letters.
_VARIABLE_ORDER = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"


def _primary_weight(ch: str) -> tuple[int, int]:
    if ch.isspace():
        return (0, ord(ch))
    index = _VARIABLE_ORDER.find(ch)
    if index >= 0:
        return (1, index)
    if ch.isdigit():
        return (3, ord(ch))
    if ch.isalpha():
        return (4, ord(ch))
    return (2, ord(ch))


def _clusters(text: str) -> List[Tuple[str, str]]:
    """Split ``text`` into (base character, combining marks) pairs."""
    clusters: List[Tuple[str, str]] = []
    for ch in unicodedata.normalize("NFKD", text):
        if clusters and unicodedata.combining(ch):
            base, marks = clusters[-1]
            clusters[-1] = (base, marks + ch)
        else:
            clusters.append((ch, ""))
    return clusters


def collation_key(text: str) -> tuple:
    """Locale-aware sort key for a term, modelled on Unicode root collation.

    Levels are compared in order:

    1. base letters, ignoring accents and case; whitespace and
       punctuation sort before digits, digits before letters
    2. accents
    3. case, lower before upper
    4. the raw string, so the ordering is total

    Examples:
        >>> sorted(["Beta", "alpha", "Äpfel"], key=collation_key)
        ['alpha', 'Äpfel', 'Beta']
        >>> sorted(["résumé", "Resume", "resume"], key=collation_key)
        ['resume', 'Resume', 'résumé']
    """
    clusters = _clusters(text)
    base = "".join(ch for ch, _ in clusters)
    return (
        tuple(_primary_weight(ch) for ch in base.casefold()),
        tuple(marks for _, marks in clusters),
        tuple(ch != ch.lower() for ch, _ in clusters),
        text,
    )


def sort_entries(entries: Iterable[Entry]) -> List[Entry]:
    """Return entries sorted by ``term``; equal terms keep their order."""
    return sorted(entries, key=lambda entry: collation_key(str(entry.get("term", ""))))


def quote_scalars(value: Any) -> Any:
    """Recursively wrap string values so they are emitted quoted.

    Mapping keys are left plain; non-string scalars keep their type.
    """
    if isinstance(value, dict):
        return {key: quote_scalars(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [quote_scalars(item) for item in value]
    if isinstance(value, str):
        return SingleQuotedScalarString(value)
    return value


def _yaml() -> YAML:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.width = 4096  # Prevent line wrapping
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def dump_mrg(mrg: MergedGlossary) -> str:
    """Serialize a merged glossary to YAML text."""
    stream = io.StringIO()
    _yaml().dump(quote_scalars(mrg.to_dict()), stream)
    return stream.getvalue()


def load_mrg(text: str) -> dict[str, Any]:
    """Parse MRG YAML text into plain Python data."""
    yaml = YAML(typ="safe")
    data = yaml.load(text)
    return data if isinstance(data, dict) else {}
