#!/usr/bin/env python3
"""
Tests for NotebookDocument queries and the cell edit operations.

Run with: uv run pytest test_notebook.py
"""
import copy
import sys
sys.path.insert(0, '.')

import pytest

from document import (
    NotebookDocument, CellType, IndexOutOfRange, UnknownCellId,
    make_cell, empty_markdown_cell, to_wire,
    insert_cell_at, insert_cell_after, append_cell,
    update_source, update_outputs, update_execution_count, clear_cell_output,
    remove_cell, remove_cell_at, move_cell,
)


@pytest.fixture
def notebook():
    """Three cells: a (code), b (markdown), c (code)."""
    return NotebookDocument(
        attrs={'nbformat': 4, 'nbformat_minor': 0, 'metadata': {}},
        cell_order=('a', 'b', 'c'),
        cell_map={
            'a': make_cell(CellType.CODE, 'x = 1', execution_count=1,
                           outputs=[{'output_type': 'stream', 'name': 'stdout', 'text': 'hi\n'}]),
            'b': make_cell(CellType.MARKDOWN, '# Notes'),
            'c': make_cell(CellType.CODE, 'x'),
        },
    )


NEW = make_cell(CellType.RAW, 'new')


# ============================================================================
# Queries
# ============================================================================

def test_queries(notebook):
    assert len(notebook) == 3
    assert 'b' in notebook
    assert 'z' not in notebook
    assert notebook.get_cell_index('c') == 2
    assert notebook.get_cell_index('z') == -1
    assert notebook.get_cell('z') is None
    assert notebook.cell_id_at(-1) == 'c'
    assert notebook.cell_id_at(3) is None
    assert [c['source'] for c in notebook.code_cells()] == ['x = 1', 'x']
    assert [c['source'] for c in notebook.cells_before('c')] == ['x = 1', '# Notes']
    assert [c['source'] for c in notebook.cells_before('a', include_current=True)] == ['x = 1']
    assert list(notebook.cells_before('z')) == []
    assert [cid for cid, _ in notebook] == ['a', 'b', 'c']


def test_document_is_read_only(notebook):
    with pytest.raises(AttributeError):
        notebook.cell_order = ()
    with pytest.raises(TypeError):
        notebook.cell_map['z'] = {}


# ============================================================================
# Insertion
# ============================================================================

@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_insert_at_places_id_at_index(notebook, index):
    result = insert_cell_at(notebook, NEW, 'n', index)
    assert result.cell_order[index] == 'n'
    assert result.get_cell('n') == NEW
    assert len(result) == 4


def test_insert_past_end_appends(notebook):
    result = insert_cell_at(notebook, NEW, 'n', 99)
    assert result.cell_order == ('a', 'b', 'c', 'n')


def test_insert_at_strict_rejects_out_of_range(notebook):
    with pytest.raises(IndexOutOfRange):
        insert_cell_at(notebook, NEW, 'n', 4, strict=True)
    with pytest.raises(IndexOutOfRange):
        insert_cell_at(notebook, NEW, 'n', -1, strict=True)


@pytest.mark.parametrize("index", [0, 1, 3])
def test_insert_then_remove_restores_notebook(notebook, index):
    assert remove_cell(insert_cell_at(notebook, NEW, 'n', index), 'n') == notebook


def test_insert_after(notebook):
    result = insert_cell_after(notebook, NEW, 'n', 'b')
    assert result.cell_order == ('a', 'b', 'n', 'c')
    assert insert_cell_after(notebook, NEW, 'n', 'c').cell_order[-1] == 'n'


def test_insert_after_unknown_goes_first(notebook):
    result = insert_cell_after(notebook, NEW, 'x', 'nonexistent')
    assert result.cell_order == ('x', 'a', 'b', 'c')


def test_insert_after_unknown_strict(notebook):
    with pytest.raises(UnknownCellId):
        insert_cell_after(notebook, NEW, 'x', 'nonexistent', strict=True)


def test_append(notebook):
    result = append_cell(notebook, NEW, 'n')
    assert result.cell_order == ('a', 'b', 'c', 'n')


def test_append_mints_id_when_missing(notebook):
    result = append_cell(notebook, NEW)
    new_id = result.cell_order[-1]
    assert new_id not in notebook.cell_order
    assert result.get_cell(new_id) == NEW


def test_append_to_empty_notebook():
    empty = NotebookDocument(attrs={'nbformat': 4, 'nbformat_minor': 0})
    cell = empty_markdown_cell()
    assert to_wire(append_cell(empty, cell, 'only'))['cells'] == [cell]


# ============================================================================
# Field updates
# ============================================================================

def test_update_source(notebook):
    result = update_source(notebook, 'b', '# Changed')
    assert result.get_cell('b')['source'] == '# Changed'
    assert result.get_cell('b')['cell_type'] == 'markdown'
    assert notebook.get_cell('b')['source'] == '# Notes'


def test_update_outputs_copies_list(notebook):
    outputs = [{'output_type': 'stream', 'name': 'stdout', 'text': 'new\n'}]
    result = update_outputs(notebook, 'c', outputs)
    outputs.append({'output_type': 'error'})
    assert result.get_cell('c')['outputs'] == [{'output_type': 'stream', 'name': 'stdout', 'text': 'new\n'}]


def test_update_execution_count(notebook):
    result = update_execution_count(notebook, 'c', 7)
    assert result.get_cell('c')['execution_count'] == 7
    assert update_execution_count(result, 'c', None).get_cell('c')['execution_count'] is None


def test_clear_cell_output(notebook):
    result = clear_cell_output(notebook, 'a')
    assert result.get_cell('a')['outputs'] == []
    assert len(notebook.get_cell('a')['outputs']) == 1


def test_update_unknown_id_creates_orphan(notebook):
    result = update_source(notebook, 'ghost', 'boo')
    assert result.cell_order == notebook.cell_order
    assert result.get_cell('ghost') == {'source': 'boo'}
    assert result.orphan_ids() == ['ghost']
    assert to_wire(result) == to_wire(notebook)


@pytest.mark.parametrize("edit", [
    lambda nb: update_source(nb, 'ghost', 's', strict=True),
    lambda nb: update_outputs(nb, 'ghost', [], strict=True),
    lambda nb: update_execution_count(nb, 'ghost', 1, strict=True),
    lambda nb: clear_cell_output(nb, 'ghost', strict=True),
])
def test_update_unknown_id_strict(notebook, edit):
    with pytest.raises(UnknownCellId):
        edit(notebook)


def test_edits_share_untouched_cells(notebook):
    result = update_source(notebook, 'b', 'changed')
    assert result.get_cell('a') is notebook.get_cell('a')
    assert result.get_cell('c') is notebook.get_cell('c')
    assert result.attrs == notebook.attrs


# ============================================================================
# Removal and reordering
# ============================================================================

def test_remove_cell(notebook):
    result = remove_cell(notebook, 'b')
    assert result.cell_order == ('a', 'c')
    assert 'b' not in result.cell_map
    assert notebook.cell_order == ('a', 'b', 'c')


def test_remove_cell_drops_every_occurrence():
    doc = NotebookDocument(cell_order=('a', 'b', 'a'), cell_map={'a': {}, 'b': {}})
    assert remove_cell(doc, 'a').cell_order == ('b',)


def test_remove_unknown_is_noop(notebook):
    assert remove_cell(notebook, 'ghost') == notebook
    with pytest.raises(UnknownCellId):
        remove_cell(notebook, 'ghost', strict=True)


def test_remove_cell_at(notebook):
    assert remove_cell_at(notebook, 0).cell_order == ('b', 'c')
    assert remove_cell_at(notebook, -1).cell_order == ('a', 'b')


def test_remove_cell_at_out_of_range(notebook):
    assert remove_cell_at(notebook, 3) == notebook
    assert remove_cell_at(notebook, -4) == notebook
    with pytest.raises(IndexOutOfRange):
        remove_cell_at(notebook, 3, strict=True)


def test_move_cell(notebook):
    assert move_cell(notebook, 'a', 1).cell_order == ('b', 'a', 'c')
    assert move_cell(notebook, 'c', -1).cell_order == ('a', 'c', 'b')
    assert move_cell(notebook, 'a', -1) == notebook
    assert move_cell(notebook, 'ghost', 1) == notebook


def test_move_cell_strict(notebook):
    with pytest.raises(UnknownCellId):
        move_cell(notebook, 'ghost', 1, strict=True)
    with pytest.raises(IndexOutOfRange):
        move_cell(notebook, 'c', 1, strict=True)


def test_documents_are_unhashable_but_deep_copyable(notebook):
    with pytest.raises(TypeError):
        hash(notebook)
    clone = copy.deepcopy(notebook)
    assert clone == notebook
    assert clone.get_cell('a') is not notebook.get_cell('a')


def test_edit_result_wraps_fresh_map(notebook):
    result = update_source(notebook, 'b', 'changed')
    assert result.cell_map is not notebook.cell_map
    assert result.attrs is notebook.attrs
    assert move_cell(notebook, 'a', 1).cell_map is notebook.cell_map
