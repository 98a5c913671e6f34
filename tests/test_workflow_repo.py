"""Tests for WorkflowRepository against a mocked collection"""
from unittest.mock import MagicMock

import pytest
from pymongo.errors import DuplicateKeyError

from reqflow.domain.errors import ConcurrencyError, WorkflowNotFoundError
from reqflow.repositories.workflow_repo import WorkflowRepository


@pytest.fixture
def collection():
    return MagicMock()


@pytest.fixture
def workflow_repo(collection):
    return WorkflowRepository(collection=collection)


def test_first_save_inserts_version_one(workflow_repo, collection, small_change):
    collection.find_one.return_value = None

    saved = workflow_repo.save_definition(small_change)

    assert saved.version == 1
    assert saved.created_at is not None
    doc = collection.insert_one.call_args[0][0]
    assert doc["_id"] == "small_change"
    assert doc["version"] == 1
    collection.find_one_and_replace.assert_not_called()


def test_save_recomputes_metadata(workflow_repo, collection, small_change):
    collection.find_one.return_value = None
    definition = small_change.model_copy(update={
        "metadata": small_change.metadata.model_copy(update={"total_estimated_days": 99})
    })

    saved = workflow_repo.save_definition(definition)

    assert saved.metadata.total_estimated_days == 10
    assert saved.metadata.supports_branching is True


def test_update_checks_version(workflow_repo, collection, small_change):
    definition = small_change.model_copy(update={"version": 1})
    collection.find_one.return_value = {"version": 1}
    collection.find_one_and_replace.return_value = {"type": "small_change"}

    saved = workflow_repo.save_definition(definition)

    assert saved.version == 2
    query = collection.find_one_and_replace.call_args[0][0]
    assert query == {"type": "small_change", "version": 1}


def test_stale_version_conflicts(workflow_repo, collection, small_change):
    collection.find_one.return_value = {"version": 3}
    collection.find_one_and_replace.return_value = None

    with pytest.raises(ConcurrencyError):
        workflow_repo.save_definition(small_change.model_copy(update={"version": 1}))


def test_concurrent_create_conflicts(workflow_repo, collection, small_change):
    collection.find_one.return_value = None
    collection.insert_one.side_effect = DuplicateKeyError("dup")

    with pytest.raises(ConcurrencyError):
        workflow_repo.save_definition(small_change)


def test_get_definition(workflow_repo, collection, small_change):
    collection.find_one.return_value = {**small_change.model_dump(mode="json"), "_id": "small_change"}

    definition = workflow_repo.get_definition("small_change")

    assert definition.id == small_change.id
    assert [s.id for s in definition.steps] == [s.id for s in small_change.steps]


def test_corrupt_document_is_skipped(workflow_repo, collection):
    collection.find_one.return_value = {"_id": "broken", "type": "broken"}

    assert workflow_repo.get_definition("broken") is None
    with pytest.raises(WorkflowNotFoundError):
        workflow_repo.load_definition("broken")


def test_set_active_increments_version(workflow_repo, collection, small_change):
    collection.find_one_and_update.return_value = {
        **small_change.model_dump(mode="json"), "version": 2, "is_active": False
    }

    definition = workflow_repo.set_active("small_change", False, 1)

    assert definition.version == 2
    assert definition.is_active is False
    update = collection.find_one_and_update.call_args[0][1]
    assert update["$inc"] == {"version": 1}


def test_set_active_conflict_and_missing(workflow_repo, collection):
    collection.find_one_and_update.return_value = None

    collection.find_one.return_value = {"version": 5}
    with pytest.raises(ConcurrencyError):
        workflow_repo.set_active("small_change", True, 1)

    collection.find_one.return_value = None
    with pytest.raises(WorkflowNotFoundError):
        workflow_repo.set_active("small_change", True, 1)
