"""Document layer - notebook model, multiline codec, upgrades and conversion."""
from .errors import (
    NotebookError, UnsupportedVersion, MalformedDocument,
    UnknownCellId, IndexOutOfRange, DuplicateCellId,
)
from .cell import CellType, new_cell_id, make_cell, empty_code_cell, empty_markdown_cell, empty_raw_cell
from .multiline import clean_multiline, make_multiline, clean_multiline_cell, make_multiline_cell
from .upgrade import NBFORMAT, NBFORMAT_MINOR, UpgradeStep, UpgradeRegistry, upgrade, default_registry
from .notebook import (
    NotebookDocument,
    insert_cell_at, insert_cell_after, append_cell,
    update_source, update_outputs, update_execution_count, clear_cell_output,
    remove_cell, remove_cell_at, move_cell,
)
from .serialization import (
    to_internal, to_wire, from_js, to_js, empty_notebook,
    load_notebook, save_notebook,
)

__all__ = [
    'NotebookError', 'UnsupportedVersion', 'MalformedDocument',
    'UnknownCellId', 'IndexOutOfRange', 'DuplicateCellId',
    'CellType', 'new_cell_id', 'make_cell', 'empty_code_cell', 'empty_markdown_cell', 'empty_raw_cell',
    'clean_multiline', 'make_multiline', 'clean_multiline_cell', 'make_multiline_cell',
    'NBFORMAT', 'NBFORMAT_MINOR', 'UpgradeStep', 'UpgradeRegistry', 'upgrade', 'default_registry',
    'NotebookDocument',
    'insert_cell_at', 'insert_cell_after', 'append_cell',
    'update_source', 'update_outputs', 'update_execution_count', 'clear_cell_output',
    'remove_cell', 'remove_cell_at', 'move_cell',
    'to_internal', 'to_wire', 'from_js', 'to_js', 'empty_notebook',
    'load_notebook', 'save_notebook',
]
