"""
Pytest configuration for the application packages.

Registers markers and auto-marks tests by filename. Fixtures shared by
all apps live in the root conftest.py, app-specific fixtures in each
app's tests/conftest.py.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full checkout and callback journeys)
    - test_views.py, test_*_service.py, test_checks.py → integration
    - test_models.py, test_helpers.py, test_verification.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    # Filename patterns for each category
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_offer_service.py",
        "test_callback_service.py",
        "test_gateway.py",
        "test_checks.py",
        "test_repositories.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_helpers.py",
        "test_verification.py",
        "test_eligibility.py",
        "test_conf.py",
        "test_provider_adapter.py",
        "test_exceptions.py",
        "test_services.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = item.path.name

        # Check patterns in priority order
        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)
