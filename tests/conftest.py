"""
Test Configuration
==================

Shared frame fixtures for the qrmux test suite.
"""

import pytest

from qrmux.sender import generate_frames

FIXED_TS = 1700000000000


@pytest.fixture
def hi_frames():
    """Single-frame transmission of "Hi"."""
    return generate_frames("Hi", 800, timestamp=FIXED_TS)


@pytest.fixture
def long_text():
    return "x" * 1000


@pytest.fixture
def long_frames(long_text):
    """Two-frame transmission (800 + 200 chars)."""
    return generate_frames(long_text, 800, timestamp=FIXED_TS)


@pytest.fixture
def multi_text():
    return "".join(f"line {i}: héllo wörld 🌍\n" for i in range(60))


@pytest.fixture
def multi_frames(multi_text):
    return generate_frames(multi_text, 100, timestamp=FIXED_TS)
