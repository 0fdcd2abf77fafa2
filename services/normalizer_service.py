"""
Normalizer Service - file-level notebook normalization.

Loads a notebook file of any supported nbformat version, runs it through
the in-memory model and writes canonical nbformat JSON back out. Used by
the `nbcommute` command line tool.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from document import load_notebook, save_notebook
from .nbcommute_config import NbcommuteConfig, get_config

logger = logging.getLogger(__name__)


@dataclass
class NormalizeResult:
    """Summary of one normalized notebook."""
    source: Path
    destination: Path
    cell_count: int
    nbformat: int
    nbformat_minor: Optional[int]
    orig_nbformat: Optional[int] = None

    @property
    def upgraded(self) -> bool:
        return self.orig_nbformat is not None and self.orig_nbformat != self.nbformat

    def summary(self) -> str:
        msg = f"{self.source} -> {self.destination}: {self.cell_count} cell(s), nbformat {self.nbformat}.{self.nbformat_minor}"
        if self.upgraded:
            msg += f" (upgraded from {self.orig_nbformat})"
        return msg


def normalize_file(
    path: Path,
    out: Optional[Path] = None,
    config: Optional[NbcommuteConfig] = None,
    strict: Optional[bool] = None,
) -> NormalizeResult:
    """
    Normalize the notebook at `path` and write it to `out` (in place by default).

    Args:
        path: Notebook to read
        out: Where to write; defaults to `path`
        config: Settings to use; defaults to the cached config
        strict: Overrides `config.strict` when given

    Raises:
        NotebookError: when the notebook cannot be upgraded or converted
    """
    config = config or get_config()
    strict = config.strict if strict is None else strict
    path = Path(path)
    out = Path(out) if out else path

    logger.info(f"Normalizing {path} (strict={strict}, target nbformat {config.target_nbformat})")
    notebook = load_notebook(path, target=config.target_nbformat, strict=strict)
    save_notebook(notebook, out, strict=strict)

    return NormalizeResult(
        source=path,
        destination=out,
        cell_count=len(notebook),
        nbformat=notebook.nbformat,
        nbformat_minor=notebook.nbformat_minor,
        orig_nbformat=notebook.metadata.get('orig_nbformat'),
    )
