"""Tests for WorkflowGraph indexing and edges"""
import pytest

from reqflow.domain.models import Branch, NEXT_CONDITION_TAG
from reqflow.domain.errors import StepNotFoundError
from reqflow.engine.graph import WorkflowGraph, TERMINAL_LABEL

from .conftest import make_step


def test_find_and_get():
    graph = WorkflowGraph([make_step("a", 1), make_step("b", 2)])

    assert graph.find("b").id == "b"
    assert graph.find("missing") is None
    with pytest.raises(StepNotFoundError):
        graph.get("missing")


def test_implicit_edge_goes_to_next_order():
    graph = WorkflowGraph([make_step("a", 1), make_step("b", 2, title="Second")])

    edges = graph.outgoing_edges(graph.get("a"))

    assert len(edges) == 1
    assert edges[0].target_step_id == "b"
    assert edges[0].condition_tag == NEXT_CONDITION_TAG
    assert edges[0].label == "Second"
    assert edges[0].target_index == 1


def test_last_step_goes_to_terminal():
    graph = WorkflowGraph([make_step("a", 1)])

    edges = graph.outgoing_edges(graph.get("a"))

    assert len(edges) == 1
    assert edges[0].target_step_id == "step-end"
    assert edges[0].label == TERMINAL_LABEL
    assert edges[0].target_index is None


def test_declared_branches_are_returned_in_order():
    step = make_step("a", 1, branches=[
        Branch(condition_tag="approved", target_step_id="c"),
        Branch(condition_tag="rejected", target_step_id="step-end"),
    ])
    graph = WorkflowGraph([step, make_step("b", 2), make_step("c", 3)])

    edges = graph.outgoing_edges(step)

    assert [e.target_step_id for e in edges] == ["c", "step-end"]
    assert [e.target_index for e in edges] == [2, None]


def test_duplicate_ids_keep_first_occurrence():
    first = make_step("a", 1, title="First")
    graph = WorkflowGraph([first, make_step("a", 2, title="Second")])

    assert graph.get("a").title == "First"
    assert "Duplicate step id: a" in graph.structural_errors


def test_dangling_and_blank_targets_are_reported():
    step = make_step("a", 1, branches=[
        Branch(condition_tag="approved", target_step_id="ghost"),
        Branch(condition_tag="rejected", target_step_id=""),
    ])
    graph = WorkflowGraph([step])

    assert any("ghost" in e for e in graph.structural_errors)
    assert any("target step is missing" in e for e in graph.structural_errors)


def test_entry_step_defaults_to_lowest_order():
    graph = WorkflowGraph([make_step("b", 2), make_step("a", 1), make_step("c", 1)])

    assert graph.entry_step().id == "a"


def test_explicit_entry_step():
    graph = WorkflowGraph([make_step("a", 1), make_step("b", 2)], entry_step_id="b")

    assert graph.entry_step().id == "b"


def test_unknown_entry_step_is_an_error():
    graph = WorkflowGraph([make_step("a", 1)], entry_step_id="zzz")

    assert "Entry step 'zzz' not found in steps" in graph.structural_errors
    assert graph.entry_step().id == "a"


def test_step_colliding_with_terminal():
    graph = WorkflowGraph([make_step("step-end", 1)])

    assert graph.structural_errors


def test_empty_graph():
    graph = WorkflowGraph([])

    assert len(graph) == 0
    assert graph.entry_step() is None
