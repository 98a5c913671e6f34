"""Permission Evaluator - Role-based allow/deny decisions for steps and form fields"""
from typing import Callable, Iterable, FrozenSet, Optional, Sequence, Tuple

from ..domain.models import PermissionSpec, PermissionDecision
from ..domain.enums import PermissionRule
from ..utils.logger import get_logger

logger = get_logger(__name__)

# A check returns False (deny), True (allow) or None (undecided, consult next rule)
PermissionCheck = Callable[[PermissionSpec, FrozenSet[str]], Optional[bool]]


def to_role_set(roles: Iterable[str]) -> FrozenSet[str]:
    """Role collection as a set; a bare string is rejected rather than split into characters"""
    if isinstance(roles, str):
        raise TypeError(f"roles must be a collection of role names, got str {roles!r}")
    return frozenset(roles)


def _check_denied_roles(spec: PermissionSpec, roles: FrozenSet[str]) -> Optional[bool]:
    if spec.denied_roles and not roles.isdisjoint(spec.denied_roles):
        return False
    return None


def _check_requires_role(spec: PermissionSpec, roles: FrozenSet[str]) -> Optional[bool]:
    if spec.requires_role is not None and spec.requires_role not in roles:
        return False
    return None


def _check_requires_all_roles(spec: PermissionSpec, roles: FrozenSet[str]) -> Optional[bool]:
    if spec.requires_all_roles is not None and not roles.issuperset(spec.requires_all_roles):
        return False
    return None


def _check_requires_any_roles(spec: PermissionSpec, roles: FrozenSet[str]) -> Optional[bool]:
    if spec.requires_any_roles is not None and roles.isdisjoint(spec.requires_any_roles):
        return False
    return None


def _check_allowed_roles(spec: PermissionSpec, roles: FrozenSet[str]) -> Optional[bool]:
    if spec.allowed_roles:
        return not roles.isdisjoint(spec.allowed_roles)
    return None


class PermissionEvaluator:
    """
    Deterministic allow/deny decision for (PermissionSpec, role set)

    Rules run in a fixed order and the first one that decides wins:
    1. any denied role present -> deny
    2. requires_role missing -> deny
    3. any of requires_all_roles missing -> deny
    4. none of requires_any_roles present -> deny
    5. allowed_roles configured -> allow iff one is present
    6. nothing configured -> allow

    The evaluator is pure. Administrator bypass is applied by the caller
    (WorkflowProjector), so the same rules serve form-field permissions.
    """

    RULES: Sequence[Tuple[PermissionRule, PermissionCheck]] = (
        (PermissionRule.DENIED_ROLES, _check_denied_roles),
        (PermissionRule.REQUIRES_ROLE, _check_requires_role),
        (PermissionRule.REQUIRES_ALL_ROLES, _check_requires_all_roles),
        (PermissionRule.REQUIRES_ANY_ROLES, _check_requires_any_roles),
        (PermissionRule.ALLOWED_ROLES, _check_allowed_roles),
    )

    def evaluate(self, spec: PermissionSpec, roles: Iterable[str]) -> PermissionDecision:
        """
        Evaluate a permission spec against a role set

        Args:
            spec: Permission rule of a step or field
            roles: Caller's resolved roles

        Returns:
            Decision with the rule that produced it
        """
        role_set = to_role_set(roles)
        for rule, check in self.RULES:
            outcome = check(spec, role_set)
            if outcome is not None:
                logger.debug(f"Permission {'allowed' if outcome else 'denied'} by {rule.value}")
                return PermissionDecision(allowed=outcome, rule=rule)
        return PermissionDecision(allowed=True, rule=PermissionRule.DEFAULT)

    def check_permission(self, spec: PermissionSpec, roles: Iterable[str]) -> bool:
        """Check if the role set satisfies the permission spec"""
        return self.evaluate(spec, roles).allowed


def check_permission(spec: PermissionSpec, roles: Iterable[str]) -> bool:
    """Module-level shortcut for one-off checks"""
    return PermissionEvaluator().check_permission(spec, roles)
