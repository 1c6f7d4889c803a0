"""Exception hierarchy for merged glossary generation."""

from __future__ import annotations

from pathlib import Path


class GlossaryError(Exception):
    """Base exception for glossary generation errors."""
    pass


class VersionNotFoundError(GlossaryError):
    """Requested vsntag matches neither a primary nor an alt vsntag.

    This is fatal for the whole invocation: nothing was resolved, so
    nothing gets published.
    """

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"The specified vsntag '{tag}' was not found in the SAF")


class TermResolutionError(GlossaryError):
    """The term selection criteria of a version could not be resolved.

    Only the publish of the affected version is aborted; sibling
    versions in the same run continue.
    """

    def __init__(self, reason: str, vsntag: str | None = None):
        self.reason = reason
        self.vsntag = vsntag
        if vsntag:
            super().__init__(f"Cannot resolve terms for version '{vsntag}': {reason}")
        else:
            super().__init__(f"Cannot resolve terms: {reason}")


class FileOperationError(GlossaryError):
    """A filesystem step of the publish pipeline failed."""

    code = "E000"

    def __init__(self, path: Path, cause: Exception | None = None, code: str | None = None):
        self.path = Path(path)
        self.cause = cause
        if code is not None:
            self.code = code
        detail = f": {cause}" if cause else ""
        super().__init__(f"{self.code} {self.describe()} '{self.path}'{detail}")

    def describe(self) -> str:
        return "File operation failed for"


class DirectoryCreateFailure(FileOperationError):
    """Parent directory for a target file could not be created."""

    code = "E007"

    def describe(self) -> str:
        return "Error creating directory"


class FileWriteFailure(FileOperationError):
    """Target file (or alias link) could not be written."""

    code = "E008"

    def describe(self) -> str:
        return "Error writing file"


class SafError(GlossaryError):
    """Scope Administration File is missing or invalid."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid SAF '{self.path}': {reason}")
