"""Workflow Graph - Indexed view of a definition's steps and edges"""
from typing import Dict, List, NamedTuple, Optional, Sequence

from ..domain.models import (
    WorkflowDefinition, Step, TERMINAL_STEP_ID, NEXT_CONDITION_TAG
)
from ..domain.errors import StepNotFoundError

TERMINAL_LABEL = "End of workflow"


class Edge(NamedTuple):
    """Outgoing transition; target_index is None for the terminal sentinel"""
    target_step_id: str
    condition_tag: str
    label: str
    target_index: Optional[int]


class WorkflowGraph:
    """
    Arena of steps with an id -> index map resolved once at construction

    Construction never raises on malformed content. Duplicate ids, blank or
    dangling branch targets and an unknown explicit entry step are collected
    in structural_errors; the first occurrence of a duplicated id wins.
    """

    def __init__(
        self,
        steps: Sequence[Step],
        terminal_step_id: str = TERMINAL_STEP_ID,
        entry_step_id: Optional[str] = None
    ):
        self.terminal_step_id = terminal_step_id
        self.steps: List[Step] = list(steps)
        self.structural_errors: List[str] = []

        self._index: Dict[str, int] = {}
        self._order_index: Dict[int, int] = {}

        for i, step in enumerate(self.steps):
            if step.id in self._index:
                self.structural_errors.append(f"Duplicate step id: {step.id}")
                continue
            if step.id == terminal_step_id:
                self.structural_errors.append(
                    f"Step id '{step.id}' collides with the terminal sentinel"
                )
            self._index[step.id] = i
            self._order_index.setdefault(step.order, i)

        self._entry_step_id = entry_step_id
        if entry_step_id is not None and entry_step_id not in self._index:
            self.structural_errors.append(f"Entry step '{entry_step_id}' not found in steps")

        for step in self.steps:
            for position, branch in enumerate(step.branches):
                target = branch.target_step_id
                if not target or not target.strip():
                    self.structural_errors.append(
                        f"Step {step.id}, branch {position + 1}: target step is missing"
                    )
                elif target != terminal_step_id and target not in self._index:
                    self.structural_errors.append(
                        f"Step {step.id}, branch {position + 1} ('{branch.condition_tag}') "
                        f"targets non-existent step: {target}"
                    )

    @classmethod
    def from_definition(
        cls,
        definition: WorkflowDefinition,
        terminal_step_id: str = TERMINAL_STEP_ID
    ) -> "WorkflowGraph":
        return cls(definition.steps, terminal_step_id, definition.entry_step_id)

    def __len__(self) -> int:
        return len(self.steps)

    # =========================================================================
    # Lookup
    # =========================================================================

    def index_of(self, step_id: str) -> Optional[int]:
        return self._index.get(step_id)

    def find(self, step_id: str) -> Optional[Step]:
        index = self._index.get(step_id)
        return self.steps[index] if index is not None else None

    def get(self, step_id: str) -> Step:
        """Get step by ID or raise StepNotFoundError"""
        step = self.find(step_id)
        if step is None:
            raise StepNotFoundError(
                f"Step {step_id} not found",
                details={"step_id": step_id}
            )
        return step

    def is_terminal(self, step_id: str) -> bool:
        return step_id == self.terminal_step_id

    def entry_index(self) -> Optional[int]:
        """Explicit entry step if it resolves, else lowest order (first declared on ties)"""
        if self._entry_step_id is not None and self._entry_step_id in self._index:
            return self._index[self._entry_step_id]
        if not self.steps:
            return None
        return min(self._index.values(), key=lambda i: (self.steps[i].order, i))

    def entry_step(self) -> Optional[Step]:
        index = self.entry_index()
        return self.steps[index] if index is not None else None

    # =========================================================================
    # Edges
    # =========================================================================

    def outgoing_edges(self, step: Step) -> List[Edge]:
        """
        Outgoing edges of a step

        Declared branches are returned verbatim. A step without branches gets
        one implicit edge to the step with order + 1, or to the terminal
        sentinel when no such step exists.
        """
        if step.branches:
            return [
                Edge(
                    target_step_id=branch.target_step_id,
                    condition_tag=branch.condition_tag,
                    label=branch.label,
                    target_index=self._index.get(branch.target_step_id),
                )
                for branch in step.branches
            ]

        next_index = self._order_index.get(step.order + 1)
        if next_index is None:
            return [Edge(self.terminal_step_id, NEXT_CONDITION_TAG, TERMINAL_LABEL, None)]

        next_step = self.steps[next_index]
        return [Edge(next_step.id, NEXT_CONDITION_TAG, next_step.title, next_index)]
