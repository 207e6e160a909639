"""
Pytest configuration and fixtures for the script interpreter tests.
"""

import os
import sys

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from interpreter import Interpreter


@pytest.fixture
def output():
    """Lines written by print statements, in order."""
    return []


@pytest.fixture
def interpreter(output):
    return Interpreter(output_sink=output.append)
