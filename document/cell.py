"""Cell types, identity minting and empty cell templates."""
from enum import Enum
from typing import Any, Dict
import uuid


class CellType(str, Enum):
    """Type of cell content, as stored in `cell_type`."""
    CODE = "code"
    MARKDOWN = "markdown"
    RAW = "raw"


def new_cell_id() -> str:
    """Mint a fresh, universally unique cell id."""
    return str(uuid.uuid4())


def empty_code_cell() -> Dict[str, Any]:
    """A code cell with no source, no outputs and no execution count."""
    return {
        'cell_type': CellType.CODE.value,
        'execution_count': None,
        'metadata': {'collapsed': False},
        'source': '',
        'outputs': [],
    }


def empty_markdown_cell() -> Dict[str, Any]:
    return {
        'cell_type': CellType.MARKDOWN.value,
        'metadata': {},
        'source': '',
    }


def empty_raw_cell() -> Dict[str, Any]:
    return {
        'cell_type': CellType.RAW.value,
        'metadata': {},
        'source': '',
    }


def make_cell(cell_type: CellType = CellType.CODE, source: str = "", **fields) -> Dict[str, Any]:
    """
    Build a cell dict of the given type with `source` and extra fields.

    Starts from the matching empty template, so code cells always carry
    `outputs` and `execution_count`.
    """
    cell_type = CellType(cell_type)
    if cell_type == CellType.CODE:
        cell = empty_code_cell()
    elif cell_type == CellType.MARKDOWN:
        cell = empty_markdown_cell()
    else:
        cell = empty_raw_cell()
    cell['source'] = source
    cell.update(fields)
    return cell
