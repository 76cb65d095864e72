"""Exception hierarchy for parse and import failures"""

from typing import Optional


class ContentImportError(Exception):
    """Base exception for all mdimport errors."""


class DocumentError(ContentImportError):
    """Base exception for source document failures; carries the file path."""

    def __init__(self, path: Optional[str], reason: str):
        where = path or "<text>"
        super().__init__(f"{where}: {reason}")
        self.path = path
        self.reason = reason


class MalformedDocument(DocumentError):
    """Raised when the front-matter envelope is missing or its payload does not parse."""


class UnreadableDocument(DocumentError):
    """Raised when a source file cannot be read or decoded."""


class RecordRejected(ContentImportError):
    """Raised by a backend adapter when it refuses to create a record."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors) or "record rejected")
        self.errors = list(errors)


class BackendWriteFailure(ContentImportError):
    """Raised when a page or block creation is rejected; aborts the import run."""

    def __init__(self, label: str, errors: list[str]):
        super().__init__(f"Backend rejected {label}: {', '.join(errors)}")
        self.label = label
        self.errors = list(errors)
