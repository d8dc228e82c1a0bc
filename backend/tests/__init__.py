"""
Test Suite

Structure:
    tests/
    ├── __init__.py         # This file
    ├── conftest.py         # Shared fixtures and factories
    └── unit/
        ├── test_engine.py          # Status/permission tables, guard, return window
        ├── test_notifications.py   # Resolver, templates, adapter, processor, emitter
        ├── test_services.py        # Lifecycle and preference services
        ├── test_repositories.py    # Motor repositories against mocked collections
        └── test_utils.py           # Time, id and logging helpers

To run tests:
    pytest backend/tests/
"""
