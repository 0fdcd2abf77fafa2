"""
Multiline text codec.

nbformat stores multiline text either as one string or as a list of line
fragments. In memory we always keep the joined string ("clean"); on the
way out we split it back into fragments ("make").

Multiline locations:
- cell `source`
- output `text`
- every value of an output `data` bundle and of cell `attachments` bundles,
  except JSON mime types, whose values are real JSON

Values of any other shape are left as they are.
"""
import re
from typing import Any, Callable, Dict, List

_JSON_MIME = re.compile(r'^application/(.*\+)?json$')
_AFTER_NEWLINE = re.compile(r'(?<=\n)')


def is_json_mime(key: str) -> bool:
    """True for `application/json` and `application/*+json` mime types."""
    return bool(_JSON_MIME.match(key))


def _split_lines(text: str) -> List[str]:
    # Only \n ends a line; \r, form feeds and unicode separators stay inside fragments
    lines = _AFTER_NEWLINE.split(text)
    if lines[-1] == '':
        lines.pop()
    return lines


def _is_fragments(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def join_multiline(value: Any) -> Any:
    """Join a list of line fragments into one string; anything else passes through."""
    if _is_fragments(value):
        return ''.join(value)
    return value


def split_multiline(value: Any) -> Any:
    """
    Split a string into line fragments, each ending in a newline except
    possibly the last. Fragment lists are re-split so the result is
    canonical; anything else passes through.
    """
    if isinstance(value, str):
        return _split_lines(value)
    if _is_fragments(value):
        return _split_lines(''.join(value))
    return value


def _map_bundle(bundle: Any, fn: Callable[[Any], Any]) -> Any:
    if not isinstance(bundle, dict):
        return bundle
    return {k: (v if is_json_mime(k) else fn(v)) for k, v in bundle.items()}


def _map_output(output: Any, fn: Callable[[Any], Any]) -> Any:
    if not isinstance(output, dict):
        return output
    new = dict(output)
    if 'text' in new:
        new['text'] = fn(new['text'])
    if 'data' in new:
        new['data'] = _map_bundle(new['data'], fn)
    return new


def _map_cell(cell: Any, fn: Callable[[Any], Any]) -> Any:
    if not isinstance(cell, dict):
        return cell
    new = dict(cell)
    if 'source' in new:
        new['source'] = fn(new['source'])
    if isinstance(new.get('outputs'), list):
        new['outputs'] = [_map_output(o, fn) for o in new['outputs']]
    if isinstance(new.get('attachments'), dict):
        new['attachments'] = {
            name: _map_bundle(bundle, fn)
            for name, bundle in new['attachments'].items()
        }
    return new


def _map_notebook(notebook: Dict[str, Any], fn: Callable[[Any], Any]) -> Dict[str, Any]:
    new = dict(notebook)
    if isinstance(new.get('cells'), list):
        new['cells'] = [_map_cell(c, fn) for c in new['cells']]
    return new


def clean_multiline_cell(cell: Dict[str, Any]) -> Dict[str, Any]:
    """Join every multiline field of a single cell."""
    return _map_cell(cell, join_multiline)


def make_multiline_cell(cell: Dict[str, Any]) -> Dict[str, Any]:
    """Split every multiline field of a single cell."""
    return _map_cell(cell, split_multiline)


def clean_multiline(notebook: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a wire notebook with all multiline fields joined."""
    return _map_notebook(notebook, join_multiline)


def make_multiline(notebook: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a wire notebook with all multiline fields split into lines."""
    return _map_notebook(notebook, split_multiline)
