"""Shared pytest fixtures for ctxwire tests."""

import pytest

from ctxwire._internal.binder import Binder
from ctxwire._internal.keys import KeyResolver
from ctxwire._internal.members import MemberClassifier
from ctxwire.context import Context
from ctxwire.link import Link


@pytest.fixture()
def context() -> Context:
    """Empty reference context."""
    return Context()


@pytest.fixture()
def link() -> Link:
    """Link with default member prefixes."""
    return Link()


@pytest.fixture()
def classifier() -> MemberClassifier:
    """Classifier with default member prefixes."""
    return MemberClassifier()


@pytest.fixture()
def key_resolver() -> KeyResolver:
    return KeyResolver()


@pytest.fixture()
def binder() -> Binder:
    return Binder()
