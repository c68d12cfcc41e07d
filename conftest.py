"""Shared pytest fixtures for the form builder tests."""

import pytest

from form_builder.form_tree import FormTree
from test_fixtures import SequentialNames


@pytest.fixture
def names() -> SequentialNames:
    """Deterministic name factory."""
    return SequentialNames()


@pytest.fixture
def tree(names) -> FormTree:
    """Empty form tree using deterministic names."""
    return FormTree(name_factory=names)
