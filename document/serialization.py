"""
Conversion between wire notebooks and `NotebookDocument`.

Load path:   wire dict -> upgrade -> clean multiline -> to_internal
Unload path: to_wire -> make multiline -> wire dict

Cell ids exist only in memory. They are minted on every load and dropped
on unload, so two loads of the same file yield different ids but the
same content.

Files are written with execnb.nbio.write_nb, the writer nbdev tooling uses.
"""
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Optional
import json
import logging

from execnb.nbio import write_nb

from .cell import new_cell_id
from .errors import DuplicateCellId, MalformedDocument, UnknownCellId
from .multiline import clean_multiline, make_multiline
from .notebook import NotebookDocument
from .upgrade import NBFORMAT, NBFORMAT_MINOR, UpgradeRegistry, upgrade

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def to_internal(notebook: Dict[str, Any], new_id: IdFactory = new_cell_id,
                strict: bool = False) -> NotebookDocument:
    """
    Index the cells of a wire notebook by freshly minted ids.

    Cell bodies are stored as they are (copied, not reshaped). Everything
    except `cells` is kept in `attrs`. A notebook without `cells` is an
    empty notebook unless `strict` is set.
    """
    if not isinstance(notebook, dict):
        raise MalformedDocument(f"Notebook must be a JSON object, got {type(notebook).__name__}")

    if 'cells' not in notebook:
        if strict:
            raise MalformedDocument("Notebook has no 'cells' field")
        logger.debug("Notebook has no 'cells' field, treating as empty")
    cells = notebook.get('cells', [])
    if not isinstance(cells, list):
        raise MalformedDocument(f"'cells' must be a list, got {type(cells).__name__}")

    cell_order = []
    cell_map = {}
    for cell in cells:
        cell_id = new_id()
        if cell_id in cell_map:
            raise DuplicateCellId(cell_id)
        cell_map[cell_id] = deepcopy(cell)
        cell_order.append(cell_id)

    attrs = {k: deepcopy(v) for k, v in notebook.items() if k != 'cells'}
    return NotebookDocument(attrs=attrs, cell_order=cell_order, cell_map=cell_map)


def to_wire(notebook: NotebookDocument, strict: bool = False) -> Dict[str, Any]:
    """
    Flatten a `NotebookDocument` back into a wire notebook.

    Ids in `cell_order` without a body produce an empty cell `{}` (strict
    mode raises UnknownCellId). Bodies no id refers to are dropped.
    """
    cells = []
    for cell_id, cell in notebook:
        if cell is None:
            if strict:
                raise UnknownCellId(cell_id)
            logger.warning(f"Cell {cell_id} is in cell order but has no body, emitting an empty cell")
            cell = {}
        cells.append(deepcopy(dict(cell)))

    orphans = notebook.orphan_ids()
    if orphans:
        logger.debug(f"Dropping {len(orphans)} unreferenced cell(s)")

    wire = deepcopy(dict(notebook.attrs))
    wire['cells'] = cells
    return wire


def from_js(notebook: Dict[str, Any], new_id: IdFactory = new_cell_id,
            registry: Optional[UpgradeRegistry] = None, target: int = NBFORMAT,
            strict: bool = False) -> NotebookDocument:
    """Load a wire notebook of any supported version into memory."""
    upgraded = upgrade(notebook, target=target, registry=registry)
    return to_internal(clean_multiline(upgraded), new_id=new_id, strict=strict)


def to_js(notebook: NotebookDocument, strict: bool = False) -> Dict[str, Any]:
    """Produce the wire notebook, with multiline text split into lines."""
    return make_multiline(to_wire(notebook, strict=strict))


def empty_notebook(new_id: IdFactory = new_cell_id) -> NotebookDocument:
    """An in-memory notebook with no cells."""
    return from_js({
        'cells': [],
        'metadata': {},
        'nbformat': NBFORMAT,
        'nbformat_minor': NBFORMAT_MINOR,
    }, new_id=new_id)


def load_notebook(path: Path, new_id: IdFactory = new_cell_id,
                  registry: Optional[UpgradeRegistry] = None, target: int = NBFORMAT,
                  strict: bool = False) -> NotebookDocument:
    """
    Load a .ipynb file into a NotebookDocument.

    The raw JSON is read directly rather than through execnb.nbio.read_nb,
    which expects a top-level `cells` list and so cannot read v3 files.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        nb_data = json.load(f)
    if not isinstance(nb_data, dict):
        raise MalformedDocument(f"{path}: notebook must be a JSON object, got {type(nb_data).__name__}")
    logger.debug(f"Read {path} (nbformat {nb_data.get('nbformat')}.{nb_data.get('nbformat_minor')})")
    return from_js(nb_data, new_id=new_id, registry=registry, target=target, strict=strict)


def save_notebook(notebook: NotebookDocument, path: Path, strict: bool = False) -> Path:
    """
    Save a NotebookDocument as .ipynb.

    execnb's write_nb sorts keys, indents by one and leaves the file
    untouched when the content is unchanged.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    write_nb(to_js(notebook, strict=strict), path)
    logger.debug(f"Wrote {len(notebook)} cell(s) to {path}")
    return path
