"""Pytest configuration for tagql tests."""

import pytest


@pytest.fixture(autouse=True)
def reset_default_compiler():
    """Restore the module-level compiler after each test."""
    import tagql.tag

    original_compiler = tagql.tag._compiler

    yield

    tagql.tag._compiler = original_compiler
