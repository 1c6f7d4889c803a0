"""Merged glossary (MRG) generation for terminology scopes."""

from .models import (
    ScopeRef,
    ScopeInfo,
    ScopeConfig,
    VersionRecord,
    Terminology,
    TermCollection,
    MergedGlossary,
    PublishResult,
    mrg_filename,
)
from .exceptions import (
    GlossaryError,
    VersionNotFoundError,
    TermResolutionError,
    FileOperationError,
    DirectoryCreateFailure,
    FileWriteFailure,
    SafError,
)
from .resolver import Resolution, VersionResolver, resolve_versions, find_duplicate_tags
from .interpreter import TermInterpreter, TermSelectionInterpreter, parse_instruction
from .rendering import collation_key, sort_entries, dump_mrg, load_mrg
from .fileio import write_file, ensure_link
from .publisher import GlossaryPublisher, build_terminology, resolve_scopes
from .generator import Generator

__all__ = [
    "ScopeRef",
    "ScopeInfo",
    "ScopeConfig",
    "VersionRecord",
    "Terminology",
    "TermCollection",
    "MergedGlossary",
    "PublishResult",
    "mrg_filename",
    "GlossaryError",
    "VersionNotFoundError",
    "TermResolutionError",
    "FileOperationError",
    "DirectoryCreateFailure",
    "FileWriteFailure",
    "SafError",
    "Resolution",
    "VersionResolver",
    "resolve_versions",
    "find_duplicate_tags",
    "TermInterpreter",
    "TermSelectionInterpreter",
    "parse_instruction",
    "collation_key",
    "sort_entries",
    "dump_mrg",
    "load_mrg",
    "write_file",
    "ensure_link",
    "GlossaryPublisher",
    "build_terminology",
    "resolve_scopes",
    "Generator",
]
