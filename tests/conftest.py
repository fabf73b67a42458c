"""Shared fixtures."""

import pytest

from models import EntityKind
from samples import FakeAPI, entity


@pytest.fixture
def fake_api():
    return FakeAPI()


@pytest.fixture
def work():
    return entity(EntityKind.WORK)


@pytest.fixture
def author():
    return entity(EntityKind.AUTHOR)


@pytest.fixture
def source():
    return entity(EntityKind.SOURCE)


@pytest.fixture
def institution():
    return entity(EntityKind.INSTITUTION)


@pytest.fixture
def publisher():
    return entity(EntityKind.PUBLISHER)


@pytest.fixture
def funder():
    return entity(EntityKind.FUNDER)
