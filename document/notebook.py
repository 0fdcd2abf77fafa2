"""
In-memory notebook model and cell edit operations.

A `NotebookDocument` is an immutable snapshot. Every edit below returns a
new snapshot; cells that were not touched are shared by reference with the
previous one, so keeping old snapshots around (undo history, concurrent
readers) costs no deep copies.
"""
from copy import deepcopy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
import logging

from .cell import CellType, new_cell_id
from .errors import IndexOutOfRange, UnknownCellId

logger = logging.getLogger(__name__)

Cell = Mapping[str, Any]


@dataclass(frozen=True)
class NotebookDocument:
    """
    A notebook with identity-indexed cells.

    - attrs: every top-level wire field except `cells` (nbformat,
      nbformat_minor, metadata, ...)
    - cell_order: cell ids in reading order
    - cell_map: cell id -> cell body

    Cell bodies are plain dicts and must be treated as read-only.
    Documents compare by value but are not hashable.
    """
    attrs: Mapping[str, Any] = field(default_factory=dict)
    cell_order: Tuple[str, ...] = ()
    cell_map: Mapping[str, Cell] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'attrs', MappingProxyType(dict(self.attrs)))
        object.__setattr__(self, 'cell_order', tuple(self.cell_order))
        object.__setattr__(self, 'cell_map', MappingProxyType(dict(self.cell_map)))

    __hash__ = None

    def __deepcopy__(self, memo):
        return NotebookDocument(
            attrs=deepcopy(dict(self.attrs), memo),
            cell_order=self.cell_order,
            cell_map=deepcopy(dict(self.cell_map), memo),
        )

    @property
    def nbformat(self) -> Optional[int]:
        return self.attrs.get('nbformat')

    @property
    def nbformat_minor(self) -> Optional[int]:
        return self.attrs.get('nbformat_minor')

    @property
    def metadata(self) -> Mapping[str, Any]:
        return self.attrs.get('metadata', {})

    @property
    def cells(self) -> List[Cell]:
        """Cell bodies in reading order (ids without a body are skipped)."""
        return [self.cell_map[i] for i in self.cell_order if i in self.cell_map]

    def __len__(self) -> int:
        return len(self.cell_order)

    def __iter__(self) -> Iterator[Tuple[str, Optional[Cell]]]:
        """Iterate (cell_id, cell) pairs in reading order."""
        for cell_id in self.cell_order:
            yield cell_id, self.cell_map.get(cell_id)

    def __contains__(self, cell_id: object) -> bool:
        return cell_id in self.cell_map

    def get_cell(self, cell_id: str) -> Optional[Cell]:
        """Get cell by ID."""
        return self.cell_map.get(cell_id)

    def get_cell_index(self, cell_id: str) -> int:
        """Get index of cell, -1 if not found."""
        try:
            return self.cell_order.index(cell_id)
        except ValueError:
            return -1

    def cell_id_at(self, index: int) -> Optional[str]:
        """Cell id at `index` (negative counts from the end), None if out of range."""
        if -len(self.cell_order) <= index < len(self.cell_order):
            return self.cell_order[index]
        return None

    def cells_before(self, cell_id: str, include_current: bool = False) -> Iterator[Cell]:
        """Iterate cells before the given cell."""
        idx = self.get_cell_index(cell_id)
        if idx < 0:
            return
        end = idx + 1 if include_current else idx
        for cid in self.cell_order[:end]:
            if cid in self.cell_map:
                yield self.cell_map[cid]

    def code_cells(self) -> List[Cell]:
        """Get all code cells."""
        return [c for c in self.cells if c.get('cell_type') == CellType.CODE.value]

    def orphan_ids(self) -> List[str]:
        """Ids in `cell_map` that no position in `cell_order` refers to."""
        ordered = set(self.cell_order)
        return [i for i in self.cell_map if i not in ordered]

    def _replace(self, cell_order: Optional[Sequence[str]] = None,
                 cell_map: Optional[Dict[str, Cell]] = None) -> 'NotebookDocument':
        # cell_order / cell_map are fresh containers owned by the new snapshot
        doc = object.__new__(NotebookDocument)
        object.__setattr__(doc, 'attrs', self.attrs)
        object.__setattr__(doc, 'cell_order', self.cell_order if cell_order is None else tuple(cell_order))
        object.__setattr__(doc, 'cell_map', self.cell_map if cell_map is None else MappingProxyType(cell_map))
        return doc


# ============================================================================
# Insertion
# ============================================================================

def insert_cell_at(notebook: NotebookDocument, cell: Cell, cell_id: str, index: int,
                   strict: bool = False) -> NotebookDocument:
    """
    Insert `cell` under `cell_id` at position `index` of the cell order.

    Follows `list.insert`: an index past the end appends and a negative
    index counts from the end. In strict mode, an index outside
    [0, len(notebook)] raises IndexOutOfRange.
    """
    size = len(notebook.cell_order)
    if strict and not 0 <= index <= size:
        raise IndexOutOfRange(index, size)

    order = list(notebook.cell_order)
    order.insert(index, cell_id)
    cell_map = dict(notebook.cell_map)
    cell_map[cell_id] = cell
    logger.debug(f"Inserted cell {cell_id} at {index}")
    return notebook._replace(cell_order=order, cell_map=cell_map)


def insert_cell_after(notebook: NotebookDocument, cell: Cell, cell_id: str, prior_cell_id: str,
                      strict: bool = False) -> NotebookDocument:
    """
    Insert `cell` directly after `prior_cell_id`.

    NOTE: when `prior_cell_id` is not in the notebook the cell goes to
    position 0, not to the end. Strict mode raises UnknownCellId instead.
    """
    idx = notebook.get_cell_index(prior_cell_id)
    if idx < 0:
        if strict:
            raise UnknownCellId(prior_cell_id)
        logger.debug(f"Prior cell {prior_cell_id} not found, inserting {cell_id} first")
    return insert_cell_at(notebook, cell, cell_id, idx + 1)


def append_cell(notebook: NotebookDocument, cell: Cell, cell_id: Optional[str] = None) -> NotebookDocument:
    """Append `cell` at the end; a fresh id is minted when none is given."""
    if cell_id is None:
        cell_id = new_cell_id()
    return insert_cell_at(notebook, cell, cell_id, len(notebook.cell_order))


# ============================================================================
# Field updates
# ============================================================================

def _set_cell_field(notebook: NotebookDocument, cell_id: str, key: str, value: Any,
                    strict: bool) -> NotebookDocument:
    # Unknown ids get an orphan entry holding just this field
    if cell_id not in notebook.cell_map:
        if strict:
            raise UnknownCellId(cell_id)
        logger.warning(f"Setting {key!r} on unknown cell {cell_id}; entry is not in cell order")
    cell = dict(notebook.cell_map.get(cell_id, {}))
    cell[key] = value
    cell_map = dict(notebook.cell_map)
    cell_map[cell_id] = cell
    return notebook._replace(cell_map=cell_map)


def update_source(notebook: NotebookDocument, cell_id: str, source: str,
                  strict: bool = False) -> NotebookDocument:
    """Replace the source of a cell."""
    return _set_cell_field(notebook, cell_id, 'source', source, strict)


def update_outputs(notebook: NotebookDocument, cell_id: str, outputs: Sequence[Mapping[str, Any]],
                   strict: bool = False) -> NotebookDocument:
    """Replace the outputs of a cell with a copy of `outputs`."""
    return _set_cell_field(notebook, cell_id, 'outputs', list(outputs), strict)


def update_execution_count(notebook: NotebookDocument, cell_id: str, count: Optional[int],
                           strict: bool = False) -> NotebookDocument:
    return _set_cell_field(notebook, cell_id, 'execution_count', count, strict)


def clear_cell_output(notebook: NotebookDocument, cell_id: str,
                      strict: bool = False) -> NotebookDocument:
    """Clear any output a cell has recorded."""
    return _set_cell_field(notebook, cell_id, 'outputs', [], strict)


# ============================================================================
# Removal and reordering
# ============================================================================

def remove_cell(notebook: NotebookDocument, cell_id: str, strict: bool = False) -> NotebookDocument:
    """
    Remove a cell's body and every occurrence of its id from the order.

    Removing an unknown id leaves the notebook unchanged.
    """
    if cell_id not in notebook.cell_map and cell_id not in notebook.cell_order:
        if strict:
            raise UnknownCellId(cell_id)
        return notebook

    cell_map = {k: v for k, v in notebook.cell_map.items() if k != cell_id}
    order = [i for i in notebook.cell_order if i != cell_id]
    logger.debug(f"Removed cell {cell_id}")
    return notebook._replace(cell_order=order, cell_map=cell_map)


def remove_cell_at(notebook: NotebookDocument, index: int, strict: bool = False) -> NotebookDocument:
    """Remove the cell at `index`; out of range leaves the notebook unchanged."""
    cell_id = notebook.cell_id_at(index)
    if cell_id is None:
        if strict:
            raise IndexOutOfRange(index, len(notebook.cell_order))
        return notebook
    return remove_cell(notebook, cell_id)


def move_cell(notebook: NotebookDocument, cell_id: str, direction: int,
              strict: bool = False) -> NotebookDocument:
    """Move cell up (-1) or down (+1) by swapping it with its neighbour."""
    idx = notebook.get_cell_index(cell_id)
    if idx < 0:
        if strict:
            raise UnknownCellId(cell_id)
        return notebook

    new_idx = idx + direction
    size = len(notebook.cell_order)
    if not 0 <= new_idx < size:
        if strict:
            raise IndexOutOfRange(new_idx, size)
        return notebook

    order = list(notebook.cell_order)
    order[idx], order[new_idx] = order[new_idx], order[idx]
    return notebook._replace(cell_order=order)
