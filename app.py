"""
nbcommute - normalize Jupyter notebooks through an identity-indexed model

Features:
- Upgrades nbformat v3 notebooks to v4
- Joins and re-splits multiline text into canonical line fragments
- Writes sorted, one-space indented nbformat JSON (only when changed)
"""
from pathlib import Path
import logging
import sys

from fastcore.script import call_parse, Param, store_true

from document import NotebookError
from services import load_config, normalize_file

logger = logging.getLogger("nbcommute")


@call_parse
def main(
    path: Param("Notebook (.ipynb) to normalize", str),
    out: Param("Write here instead of overwriting PATH", str) = None,
    strict: Param("Raise on unknown cell ids and dangling references", store_true) = False,
    config: Param("Path to nbcommute_config.json", str) = None,
    verbose: Param("Log debug output", store_true) = False,
):
    "Normalize a notebook file to canonical nbformat JSON."
    cfg = load_config(Path(config) if config else None)
    logging.basicConfig(
        level=logging.DEBUG if verbose else cfg.get_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = normalize_file(Path(path), Path(out) if out else None, config=cfg, strict=strict or None)
    except (NotebookError, OSError, ValueError) as e:
        logger.error(f"Failed to normalize {path}: {e}")
        sys.exit(1)
    print(result.summary())
