"""Test configuration for pytest."""

import logging
import os
import pytest


@pytest.fixture(autouse=True)
def configure_test_logging():
    """Configure logging for tests to be minimal."""
    os.environ['PIXMATCH_LOG_LEVEL'] = 'WARNING'

    logging.getLogger().setLevel(logging.WARNING)

    # Comparison failures are expected in several reconcile tests
    for logger_name in ['pixmatch.reconcile.model']:
        logging.getLogger(logger_name).setLevel(logging.ERROR)
