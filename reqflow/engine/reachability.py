"""Reachability Validator - Find steps that cannot be reached from the entry step"""
from typing import List, Set

from .graph import WorkflowGraph


class ReachabilityValidator:
    """
    Iterative depth-first traversal from the entry step

    Follows WorkflowGraph.outgoing_edges over arena indices with a visited
    bitset, so backward branches (rejection loops) terminate. The terminal
    sentinel and dangling targets are never expanded.
    """

    def reachable_indices(self, graph: WorkflowGraph) -> bytearray:
        visited = bytearray(len(graph))
        entry = graph.entry_index()
        if entry is None:
            return visited

        visited[entry] = 1
        stack = [entry]
        while stack:
            current = stack.pop()
            for edge in graph.outgoing_edges(graph.steps[current]):
                target = edge.target_index
                if target is None or visited[target]:
                    continue
                visited[target] = 1
                stack.append(target)
        return visited

    def reachable_step_ids(self, graph: WorkflowGraph) -> Set[str]:
        visited = self.reachable_indices(graph)
        return {graph.steps[i].id for i, seen in enumerate(visited) if seen}

    def find_orphans(self, graph: WorkflowGraph) -> List[str]:
        """
        Step ids not reachable from the entry step, in declaration order

        Duplicated ids are judged by their first (indexed) occurrence.
        """
        reachable = self.reachable_step_ids(graph)
        orphans: List[str] = []
        for step in graph.steps:
            if step.id not in reachable and step.id not in orphans:
                orphans.append(step.id)
        return orphans
