"""API endpoint tests using FastAPI TestClient"""
from .conftest import ADMIN_HEADERS


def _seed(service):
    service.seed_default_workflows()


def test_get_workflow_redacts_for_caller(client, service):
    _seed(service)

    response = client.get("/api/v1/workflows/small_change", headers={"X-User-Roles": "Requester"})

    assert response.status_code == 200
    steps = response.json()["steps"]
    assert steps[0]["title"] == "Create request"
    assert steps[2]["title"] == "Restricted access"
    assert steps[2]["branches"][0]["target_step_id"] == "step-4"


def test_get_workflow_as_admin(client, service):
    _seed(service)

    response = client.get("/api/v1/workflows/small_change", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert response.json()["steps"][2]["title"] == "Manager approval"


def test_unknown_workflow_is_404(client):
    response = client.get("/api/v1/workflows/nope")

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "WORKFLOW_NOT_FOUND"


def test_list_workflows(client, service):
    _seed(service)

    response = client.get("/api/v1/workflows", params={"active_only": True})

    assert response.status_code == 200
    assert response.json()["total"] == 1


def test_next_steps(client, service):
    _seed(service)

    response = client.post(
        "/api/v1/workflows/small_change/next-steps",
        json={"current_step_id": "step-2", "form_data": {"budget": 3000}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["blocked"] is False
    assert [n["step_id"] for n in body["next_steps"]] == ["step-4"]


def test_next_steps_blocked(client, service):
    _seed(service)

    response = client.post(
        "/api/v1/workflows/small_change/next-steps",
        json={"current_step_id": "step-3", "form_data": {}},
    )

    assert response.status_code == 200
    assert response.json() == {"current_step_id": "step-3", "next_steps": [], "blocked": True}


def test_next_steps_unknown_step(client, service):
    _seed(service)

    response = client.post(
        "/api/v1/workflows/small_change/next-steps",
        json={"current_step_id": "step-9"},
    )

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "STEP_NOT_FOUND"


def test_validate_unsaved_definition(client):
    payload = {
        "id": "wf-x",
        "type": "x",
        "name": "X",
        "steps": [
            {"id": "a", "title": "A", "order": 1,
             "branches": [{"condition_tag": "approved", "target_step_id": "missing"}]},
        ],
    }

    response = client.post("/api/v1/workflows/validate", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["is_valid"] is False
    assert body["statistics"]["total_steps"] == 1
    assert any("missing" in e for e in body["structural_errors"])


def test_save_requires_admin(client, small_change):
    payload = small_change.model_dump(mode="json")

    response = client.put("/api/v1/workflows/small_change", json=payload)

    assert response.status_code == 403


def test_save_type_mismatch(client, small_change):
    payload = small_change.model_dump(mode="json")

    response = client.put("/api/v1/workflows/other", json=payload, headers=ADMIN_HEADERS)

    assert response.status_code == 400


def test_save_and_activate(client, small_change):
    payload = small_change.model_copy(update={"is_active": False}).model_dump(mode="json")

    saved = client.put("/api/v1/workflows/small_change", json=payload, headers=ADMIN_HEADERS)
    assert saved.status_code == 200
    assert saved.json()["definition"]["version"] == 1
    assert saved.json()["validation"]["is_valid"] is True

    activated = client.post(
        "/api/v1/workflows/small_change/activate",
        json={"expected_version": 1},
        headers=ADMIN_HEADERS,
    )
    assert activated.status_code == 200
    assert activated.json()["is_active"] is True

    stale = client.post(
        "/api/v1/workflows/small_change/deactivate",
        json={"expected_version": 1},
        headers=ADMIN_HEADERS,
    )
    assert stale.status_code == 409


def test_permission_check(client):
    response = client.post(
        "/api/v1/permissions/check",
        json={
            "permission_spec": {"allowed_roles": ["Requester"], "denied_roles": ["External"]},
            "roles": ["Requester", "External"],
        },
    )

    assert response.status_code == 200
    assert response.json() == {"allowed": False, "rule": "DENIED_ROLES"}


def test_permission_check_uses_header_roles(client):
    response = client.post(
        "/api/v1/permissions/check",
        json={"permission_spec": {"requires_role": "Manager"}},
        headers={"X-User-Roles": "Manager, Approver"},
    )

    assert response.json()["allowed"] is True


def test_list_conditions(client):
    response = client.get("/api/v1/conditions")

    assert response.status_code == 200
    assert "budget_high" in response.json()["tags"]
    assert response.json()["reserved"] == ["default", "next"]


def test_correlation_id_is_echoed(client):
    response = client.get("/api/v1/conditions", headers={"X-Correlation-Id": "corr-123"})

    assert response.headers["X-Correlation-Id"] == "corr-123"
