"""Condition Registry - Tag-based branch conditions evaluated against form data"""
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..domain.models import FieldCondition, RESERVED_CONDITION_TAGS
from ..domain.enums import ConditionOperator
from ..domain.errors import ConditionRegistrationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

Predicate = Callable[[Mapping[str, Any]], bool]


class FieldPredicate:
    """
    Predicate built from a declarative FieldCondition

    Uses a simple operator DSL - no eval() or exec().
    """

    def __init__(self, condition: FieldCondition):
        self.condition = condition

    def __call__(self, form_data: Mapping[str, Any]) -> bool:
        if self.condition.operator == ConditionOperator.EXISTS:
            return self._field_exists(self.condition.field, form_data)
        field_value = self._get_field_value(self.condition.field, form_data)
        return self._compare(field_value, self.condition.operator, self.condition.value)

    def __repr__(self) -> str:
        c = self.condition
        return f"FieldPredicate({c.field} {c.operator.value} {c.value!r})"

    def _get_field_value(self, field_path: str, context: Mapping[str, Any]) -> Any:
        """
        Get field value from context using dot notation

        Example: "budget.amount" -> context["budget"]["amount"]
        """
        value: Any = context
        for part in field_path.split("."):
            if isinstance(value, Mapping):
                value = value.get(part)
            else:
                return None
        return value

    def _field_exists(self, field_path: str, context: Mapping[str, Any]) -> bool:
        value: Any = context
        for part in field_path.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return False
            value = value[part]
        return True

    def _compare(
        self,
        field_value: Any,
        operator: ConditionOperator,
        compare_value: Any
    ) -> bool:
        """Compare values using operator"""

        if operator == ConditionOperator.EQUALS:
            return field_value == compare_value

        elif operator == ConditionOperator.NOT_EQUALS:
            return field_value != compare_value

        elif operator == ConditionOperator.GREATER_THAN:
            return self._compare_numeric(field_value, compare_value, lambda a, b: a > b)

        elif operator == ConditionOperator.LESS_THAN:
            return self._compare_numeric(field_value, compare_value, lambda a, b: a < b)

        elif operator == ConditionOperator.GREATER_THAN_OR_EQUALS:
            return self._compare_numeric(field_value, compare_value, lambda a, b: a >= b)

        elif operator == ConditionOperator.LESS_THAN_OR_EQUALS:
            return self._compare_numeric(field_value, compare_value, lambda a, b: a <= b)

        elif operator == ConditionOperator.CONTAINS:
            if field_value is None:
                return False
            if isinstance(field_value, (list, tuple, set)):
                return compare_value in field_value
            return str(compare_value) in str(field_value)

        elif operator == ConditionOperator.NOT_CONTAINS:
            if field_value is None:
                return True
            if isinstance(field_value, (list, tuple, set)):
                return compare_value not in field_value
            return str(compare_value) not in str(field_value)

        elif operator == ConditionOperator.IN:
            if not isinstance(compare_value, list):
                compare_value = [compare_value]
            return field_value in compare_value

        elif operator == ConditionOperator.NOT_IN:
            if not isinstance(compare_value, list):
                compare_value = [compare_value]
            return field_value not in compare_value

        elif operator == ConditionOperator.IS_EMPTY:
            return field_value is None or field_value == "" or field_value == []

        elif operator == ConditionOperator.IS_NOT_EMPTY:
            return field_value is not None and field_value != "" and field_value != []

        return False

    def _compare_numeric(
        self,
        field_value: Any,
        compare_value: Any,
        comparator
    ) -> bool:
        """Compare numeric values; a missing value counts as 0"""
        try:
            a = float(field_value) if field_value is not None else 0
            b = float(compare_value) if compare_value is not None else 0
            return comparator(a, b)
        except (ValueError, TypeError):
            return False


class ConditionRegistry:
    """
    Open mapping from condition tag to predicate

    Populated at startup; new process types register their own tags. The
    reserved tags ('default', 'next') cannot be registered.
    """

    def __init__(self):
        self._predicates: Dict[str, Predicate] = {}

    def register(self, tag: str, predicate: Predicate, replace: bool = False) -> None:
        """
        Register a predicate under a tag

        Raises:
            ConditionRegistrationError: blank/reserved tag, non-callable
                predicate, or duplicate tag without replace=True
        """
        if not isinstance(tag, str) or not tag.strip():
            raise ConditionRegistrationError("Condition tag must be a non-empty string")
        if tag in RESERVED_CONDITION_TAGS:
            raise ConditionRegistrationError(
                f"Condition tag '{tag}' is reserved",
                details={"tag": tag}
            )
        if not callable(predicate):
            raise ConditionRegistrationError(
                f"Predicate for '{tag}' is not callable",
                details={"tag": tag}
            )
        if tag in self._predicates and not replace:
            raise ConditionRegistrationError(
                f"Condition tag '{tag}' is already registered",
                details={"tag": tag}
            )

        self._predicates[tag] = predicate
        logger.debug(f"Registered condition: {tag}", extra={"condition_tag": tag})

    def register_field_condition(
        self,
        tag: str,
        field: str,
        operator: ConditionOperator,
        value: Any = None,
        replace: bool = False
    ) -> None:
        """Register a declarative single-field predicate"""
        condition = FieldCondition(field=field, operator=operator, value=value)
        self.register(tag, FieldPredicate(condition), replace=replace)

    def condition(self, tag: str, replace: bool = False) -> Callable[[Predicate], Predicate]:
        """
        Decorator form of register

        Example:
            @registry.condition("urgent")
            def is_urgent(form_data):
                return form_data.get("priority") == "urgent"
        """
        def decorator(predicate: Predicate) -> Predicate:
            self.register(tag, predicate, replace=replace)
            return predicate
        return decorator

    def get(self, tag: str) -> Optional[Predicate]:
        return self._predicates.get(tag)

    def is_registered(self, tag: str) -> bool:
        """Reserved tags count as registered"""
        return tag in RESERVED_CONDITION_TAGS or tag in self._predicates

    def tags(self) -> List[str]:
        return sorted(self._predicates)

    def __contains__(self, tag: str) -> bool:
        return self.is_registered(tag)

    def __len__(self) -> int:
        return len(self._predicates)


class ConditionEvaluator:
    """Resolve a condition tag against form data, failing closed"""

    def __init__(self, registry: ConditionRegistry):
        self.registry = registry

    def evaluate(self, tag: str, form_data: Optional[Mapping[str, Any]]) -> bool:
        """
        Evaluate a condition tag

        Args:
            tag: Branch condition tag
            form_data: Submitted form values

        Returns:
            True for reserved tags, the predicate result for registered tags,
            False for unknown tags or predicates that raise
        """
        if tag in RESERVED_CONDITION_TAGS:
            return True

        predicate = self.registry.get(tag)
        if predicate is None:
            logger.debug(f"Unregistered condition tag: {tag}", extra={"condition_tag": tag})
            return False

        try:
            return bool(predicate(form_data or {}))
        except Exception as e:
            logger.warning(
                f"Condition evaluation failed for '{tag}': {e}",
                extra={"condition_tag": tag}
            )
            return False  # Fail closed


def create_default_registry(budget_threshold: float = 5000) -> ConditionRegistry:
    """
    Registry with the tags used by the built-in process types

    budget_high/budget_low split on the 'budget' field; the decision tags
    read 'approvalStatus'.
    """
    registry = ConditionRegistry()
    registry.register_field_condition(
        "budget_high", "budget", ConditionOperator.GREATER_THAN, budget_threshold
    )
    registry.register_field_condition(
        "budget_low", "budget", ConditionOperator.LESS_THAN_OR_EQUALS, budget_threshold
    )
    for tag, status in (
        ("approved", "approved"),
        ("rejected", "rejected"),
        ("needsInfo", "needsInfo"),
        ("accepted", "accepted"),
    ):
        registry.register_field_condition(tag, "approvalStatus", ConditionOperator.EQUALS, status)
    return registry
