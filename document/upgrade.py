"""
Version upgrade pipeline.

A wire notebook tagged with (nbformat, nbformat_minor) is carried to the
major version the in-memory model understands by applying a chain of
registered steps, each consuming version n and producing n+1. The native
version is accepted through an identity step.
"""
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
import json
import logging

from .errors import UnsupportedVersion

logger = logging.getLogger(__name__)

NBFORMAT = 4
NBFORMAT_MINOR = 0

Transform = Callable[[Dict[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class UpgradeStep:
    """One version-to-version transformation of a wire notebook."""
    from_version: int
    to_version: int
    transform: Transform
    name: str = ""

    def __post_init__(self):
        if self.to_version not in (self.from_version, self.from_version + 1):
            raise ValueError(
                f"Upgrade step must go from n to n+1 (or n to n), "
                f"got {self.from_version} -> {self.to_version}"
            )

    @property
    def is_identity(self) -> bool:
        return self.from_version == self.to_version


class UpgradeRegistry:
    """
    Ordered set of upgrade steps, at most one per consumed version
    (plus at most one identity step per version).
    """

    def __init__(self, steps: Iterable[UpgradeStep] = ()):
        self._steps: Dict[Tuple[int, int], UpgradeStep] = {}
        for step in steps:
            self.register(step)

    def register(self, step: UpgradeStep) -> 'UpgradeRegistry':
        """Add a step, replacing any step registered for the same versions."""
        key = (step.from_version, step.to_version)
        if key in self._steps:
            logger.debug(f"Replacing upgrade step {key}")
        self._steps[key] = step
        return self

    @property
    def steps(self) -> List[UpgradeStep]:
        return list(self._steps.values())

    def path(self, from_version: int, to_version: int) -> List[UpgradeStep]:
        """Steps taking `from_version` to `to_version`, in application order."""
        if from_version == to_version:
            step = self._steps.get((from_version, from_version))
            if step is None:
                raise UnsupportedVersion((from_version,), to_version, "version is not registered as native")
            return [step]
        if from_version > to_version:
            raise UnsupportedVersion((from_version,), to_version, "downgrades are not supported")

        path = []
        version = from_version
        while version < to_version:
            step = self._steps.get((version, version + 1))
            if step is None:
                raise UnsupportedVersion((from_version,), to_version, f"no step from {version}")
            path.append(step)
            version += 1
        return path


def notebook_version(notebook: Dict[str, Any]) -> Tuple[Any, Any]:
    """(nbformat, nbformat_minor) as found in the document, None when absent."""
    if not isinstance(notebook, dict):
        return None, None
    return notebook.get('nbformat'), notebook.get('nbformat_minor')


def upgrade(
    notebook: Dict[str, Any],
    target: int = NBFORMAT,
    registry: Optional[UpgradeRegistry] = None,
) -> Dict[str, Any]:
    """
    Bring a wire notebook to major version `target`.

    The input is never mutated. Raises UnsupportedVersion when the
    document has no integer `nbformat` or when no chain of steps leads to
    `target`.
    """
    if registry is None:
        registry = default_registry()

    version = notebook_version(notebook)
    major = version[0]
    if not isinstance(major, int) or isinstance(major, bool):
        raise UnsupportedVersion(version, target, "missing or non-integer nbformat")

    try:
        steps = registry.path(major, target)
    except UnsupportedVersion as e:
        raise UnsupportedVersion(version, target, e.reason) from e

    result = deepcopy(notebook)
    for step in steps:
        logger.debug(f"Applying upgrade step {step.name or step.transform.__name__} "
                     f"({step.from_version} -> {step.to_version})")
        result = step.transform(result)
    return result


# ============================================================================
# Built-in steps
# ============================================================================

def identity(notebook: Dict[str, Any]) -> Dict[str, Any]:
    return notebook


# v3 stored output payloads under short keys next to output_type
_V3_MIME_KEYS = {
    'text': 'text/plain',
    'html': 'text/html',
    'svg': 'image/svg+xml',
    'png': 'image/png',
    'jpeg': 'image/jpeg',
    'latex': 'text/latex',
    'json': 'application/json',
    'javascript': 'application/javascript',
}

_V3_OUTPUT_TYPES = {
    'pyout': 'execute_result',
    'pyerr': 'error',
}


def _as_text(value: Any) -> str:
    if isinstance(value, list):
        return ''.join(v for v in value if isinstance(v, str))
    if isinstance(value, str):
        return value
    return ''


def _upgrade_output_v3(output: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(output, dict):
        return output
    output_type = output.get('output_type')
    output_type = _V3_OUTPUT_TYPES.get(output_type, output_type)
    output['output_type'] = output_type

    if output_type in ('execute_result', 'display_data'):
        output.setdefault('metadata', {})
        if output_type == 'execute_result':
            output['execution_count'] = output.pop('prompt_number', None)
        data = output.setdefault('data', {})
        for short, mime in _V3_MIME_KEYS.items():
            if short in output:
                data[mime] = output.pop(short)
        payload = data.get('application/json')
        if isinstance(payload, str):
            try:
                data['application/json'] = json.loads(payload)
            except ValueError:
                logger.warning("Leaving unparseable application/json payload as text")
    elif output_type == 'stream':
        output['name'] = output.pop('stream', output.get('name', 'stdout'))
    elif output_type == 'error':
        output.setdefault('traceback', [])
    return output


def _upgrade_cell_v3(cell: Dict[str, Any]) -> Dict[str, Any]:
    if not isinstance(cell, dict):
        return cell
    cell.setdefault('metadata', {})
    cell_type = cell.get('cell_type')

    if cell_type == 'code':
        cell.pop('language', None)
        if 'collapsed' in cell:
            cell['metadata']['collapsed'] = cell.pop('collapsed')
        cell['source'] = cell.pop('input', cell.get('source', ''))
        cell['execution_count'] = cell.pop('prompt_number', None)
        outputs = cell.get('outputs')
        cell['outputs'] = [_upgrade_output_v3(o) for o in outputs] if isinstance(outputs, list) else []
    elif cell_type == 'heading':
        level = cell.pop('level', 1)
        if not isinstance(level, int) or level < 1:
            level = 1
        text = ' '.join(_as_text(cell.get('source', '')).splitlines())
        cell['cell_type'] = 'markdown'
        cell['source'] = f"{'#' * level} {text}"
    return cell


def upgrade_v3_to_v4(notebook: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten v3 worksheets into a v4 cell list and rename v3 fields."""
    notebook = deepcopy(notebook)
    cells = []
    worksheets = notebook.pop('worksheets', None)
    for ws in worksheets if isinstance(worksheets, list) else []:
        ws_cells = ws.get('cells') if isinstance(ws, dict) else None
        for cell in ws_cells if isinstance(ws_cells, list) else []:
            cells.append(_upgrade_cell_v3(cell))

    metadata = notebook.get('metadata')
    if not isinstance(metadata, dict):
        metadata = {}
    metadata.pop('name', None)
    metadata.pop('signature', None)
    metadata['orig_nbformat'] = notebook.get('nbformat', 3)

    notebook['metadata'] = metadata
    notebook['cells'] = cells
    notebook['nbformat'] = 4
    notebook['nbformat_minor'] = NBFORMAT_MINOR
    return notebook


def default_registry() -> UpgradeRegistry:
    """Registry with the identity step for v4 and the v3 -> v4 step."""
    return UpgradeRegistry([
        UpgradeStep(NBFORMAT, NBFORMAT, identity, name="identity"),
        UpgradeStep(3, 4, upgrade_v3_to_v4, name="v3_to_v4"),
    ])
