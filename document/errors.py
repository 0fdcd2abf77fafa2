"""Error taxonomy for notebook conversion and editing.

Only `UnsupportedVersion` is raised in the default (lenient) mode; the
other conditions are raised when a caller opts into strict mode.
"""
from typing import Optional, Tuple


class NotebookError(Exception):
    """Base class for all notebook errors."""


class UnsupportedVersion(NotebookError):
    """No upgrade path exists from the document's version to the target."""

    def __init__(self, version: Optional[Tuple], target: int, reason: str = ""):
        self.version = version
        self.target = target
        self.reason = reason
        msg = f"No upgrade path from nbformat {version} to {target}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class MalformedDocument(NotebookError, ValueError):
    """The document does not have the shape conversion requires."""


class UnknownCellId(NotebookError, LookupError):
    """A cell id is not present in the document."""

    def __init__(self, cell_id):
        self.cell_id = cell_id
        super().__init__(f"Unknown cell id: {cell_id!r}")

    def __str__(self):
        return self.args[0]


class IndexOutOfRange(NotebookError, IndexError):
    """A cell position lies outside the document."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Cell index {index} out of range for {size} cells")


class DuplicateCellId(NotebookError):
    """The id factory returned an id that is already in use."""

    def __init__(self, cell_id):
        self.cell_id = cell_id
        super().__init__(f"Cell id {cell_id!r} was minted twice")
