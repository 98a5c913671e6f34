"""Tests for PermissionEvaluator rule precedence"""
import pytest

from reqflow.domain.models import PermissionSpec
from reqflow.domain.enums import PermissionRule
from reqflow.engine.permission_evaluator import PermissionEvaluator, check_permission


@pytest.fixture
def evaluator():
    return PermissionEvaluator()


def test_unrestricted_allows_everyone(evaluator):
    decision = evaluator.evaluate(PermissionSpec(), [])

    assert decision.allowed is True
    assert decision.rule == PermissionRule.DEFAULT


def test_denied_beats_allowed(evaluator):
    spec = PermissionSpec(allowed_roles=["Requester"], denied_roles=["External"])

    decision = evaluator.evaluate(spec, ["Requester", "External"])

    assert decision.allowed is False
    assert decision.rule == PermissionRule.DENIED_ROLES


def test_allowed_roles(evaluator):
    spec = PermissionSpec(allowed_roles=["Requester"], denied_roles=["External"])

    assert evaluator.check_permission(spec, ["Requester"]) is True
    assert evaluator.check_permission(spec, ["Developer"]) is False


def test_requires_role_is_mandatory(evaluator):
    spec = PermissionSpec(allowed_roles=["Manager", "Approver"], requires_role="Manager")

    assert evaluator.check_permission(spec, ["Approver"]) is False
    assert evaluator.check_permission(spec, ["Manager"]) is True
    assert evaluator.evaluate(spec, ["Approver"]).rule == PermissionRule.REQUIRES_ROLE


def test_requires_all_roles(evaluator):
    spec = PermissionSpec(requires_all_roles=["Manager", "Finance"])

    assert evaluator.check_permission(spec, ["Manager"]) is False
    assert evaluator.check_permission(spec, ["Finance", "Manager", "Other"]) is True


def test_requires_any_roles(evaluator):
    spec = PermissionSpec(requires_any_roles=["TechnicalLead", "Developer"])

    assert evaluator.check_permission(spec, ["Developer"]) is True
    assert evaluator.check_permission(spec, ["Requester"]) is False


def test_empty_requires_any_denies(evaluator):
    spec = PermissionSpec(requires_any_roles=[])

    assert evaluator.check_permission(spec, ["Anyone"]) is False


def test_empty_requires_all_passes(evaluator):
    spec = PermissionSpec(requires_all_roles=[])

    assert evaluator.check_permission(spec, []) is True


def test_requires_rules_run_before_allowed(evaluator):
    spec = PermissionSpec(allowed_roles=["Developer"], requires_any_roles=["TechnicalLead"])

    decision = evaluator.evaluate(spec, ["Developer"])

    assert decision.allowed is False
    assert decision.rule == PermissionRule.REQUIRES_ANY_ROLES


def test_duplicate_roles_are_a_set(evaluator):
    spec = PermissionSpec(allowed_roles=["Requester", "Requester"])

    assert evaluator.check_permission(spec, ["Requester", "Requester"]) is True


def test_no_admin_bypass_in_evaluator(evaluator):
    spec = PermissionSpec(allowed_roles=["Requester"])

    assert evaluator.check_permission(spec, ["Administrator"]) is False


def test_module_level_shortcut():
    assert check_permission(PermissionSpec(denied_roles=["External"]), ["External"]) is False


def test_bare_string_roles_are_rejected(evaluator):
    with pytest.raises(TypeError):
        evaluator.check_permission(PermissionSpec(allowed_roles=["Requester"]), "Requester")
