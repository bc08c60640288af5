"""
Pytest configuration file for the lazy sequence toolkit tests.

This file ensures that the parent directory is in the Python path
so that test files can import lazy, combinators, utils, and models modules.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest

import utils


@pytest.fixture(autouse=True)
def clean_performance_metrics():
    """Start every test with an empty metrics store and default config"""
    utils.clear_performance_metrics()
    yield
    utils.clear_performance_metrics()
    utils._config = utils.LazyConfig()
