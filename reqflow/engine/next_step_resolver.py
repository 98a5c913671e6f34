"""Next Step Resolver - Determine viable successors from form data"""
from typing import Any, List, Mapping, Optional

from ..domain.models import WorkflowDefinition, NextStep, TERMINAL_STEP_ID, DEFAULT_CONDITION_TAG
from .graph import WorkflowGraph
from .condition_registry import ConditionEvaluator
from ..utils.logger import get_logger

logger = get_logger(__name__)


class NextStepResolver:
    """
    Resolve successor steps of the current step

    Given current step S and form data D:
    1. Take the outgoing edges of S (declared branches or the implicit
       next-by-order edge)
    2. Keep every edge whose condition tag evaluates true on D, or is 'default'
    3. Return all candidates in declaration order

    An empty result means the process is blocked at S. That is a valid
    outcome, not an error.
    """

    def __init__(self, condition_evaluator: ConditionEvaluator, terminal_step_id: str = TERMINAL_STEP_ID):
        self.condition_evaluator = condition_evaluator
        self.terminal_step_id = terminal_step_id

    def resolve(
        self,
        definition: WorkflowDefinition,
        current_step_id: str,
        form_data: Optional[Mapping[str, Any]] = None
    ) -> List[NextStep]:
        """
        Resolve viable next steps

        Args:
            definition: Workflow definition snapshot
            current_step_id: Step the process instance is at
            form_data: Submitted form values

        Returns:
            Candidate successors, possibly empty

        Raises:
            StepNotFoundError: If current_step_id is not part of the definition
        """
        graph = WorkflowGraph.from_definition(definition, self.terminal_step_id)

        if graph.is_terminal(current_step_id):
            return []

        current_step = graph.get(current_step_id)
        form_data = form_data or {}

        candidates: List[NextStep] = []
        for edge in graph.outgoing_edges(current_step):
            if edge.target_index is None and not graph.is_terminal(edge.target_step_id):
                logger.warning(
                    f"Skipping branch to unknown step {edge.target_step_id} from {current_step_id}",
                    extra={"workflow_id": definition.id, "step_id": current_step_id}
                )
                continue

            if (
                edge.condition_tag == DEFAULT_CONDITION_TAG
                or self.condition_evaluator.evaluate(edge.condition_tag, form_data)
            ):
                candidates.append(NextStep(
                    step_id=edge.target_step_id,
                    condition_tag=edge.condition_tag,
                    label=edge.label,
                ))

        if candidates:
            logger.info(
                f"Resolved transition: {current_step_id} -> "
                f"{', '.join(c.step_id for c in candidates)}",
                extra={"workflow_id": definition.id, "step_id": current_step_id}
            )
        else:
            logger.info(
                f"No matching branch from step {current_step_id}, process is blocked",
                extra={"workflow_id": definition.id, "step_id": current_step_id}
            )

        return candidates
