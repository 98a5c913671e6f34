"""
Test Suite

Structure:
    tests/
    ├── conftest.py                   # Shared fixtures (definitions, engine, fake repository, API client)
    ├── test_graph.py                 # Graph indexing and implicit edges
    ├── test_permission_evaluator.py  # Rule precedence
    ├── test_condition_registry.py    # Registration and fail-closed evaluation
    ├── test_reachability.py          # Orphan detection
    ├── test_validator.py             # Structural errors and warnings
    ├── test_next_step_resolver.py    # Transition resolution
    ├── test_projector.py             # Role redaction
    ├── test_workflow_repo.py         # Optimistic concurrency
    ├── test_workflow_service.py      # Save/activate rules
    └── test_api.py                   # HTTP endpoints

To run tests:
    pytest tests/
"""
