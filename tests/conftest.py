"""Shared test fixtures for drillmap tests."""

import random

import pytest

from drillmap.diagnostics import Diagnostics
from drillmap.hierarchy import HierarchyNode, aggregate, field_key, field_weight


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


COUNTRY_SET = [field_key("country"), field_key("set")]
WEIGHT = field_weight("weight")


@pytest.fixture
def records():
    """Togo/Benin scenario: root 180, Togo 150 (A 100, B 50), Benin 30 (A 30)."""
    return [
        {"country": "Togo", "set": "A", "weight": 100},
        {"country": "Togo", "set": "B", "weight": 50},
        {"country": "Benin", "set": "A", "weight": 30},
    ]


@pytest.fixture
def diagnostics():
    return Diagnostics(log=False)


@pytest.fixture
def hierarchy(records):
    return aggregate(records, COUNTRY_SET, WEIGHT)


@pytest.fixture
def random_records():
    """Deterministic pseudo-random records over three grouping fields."""
    rng = random.Random(42)
    countries = ["Togo", "Benin", "Ghana", "Niger", "Mali"]
    types = ["Article", "Book", "Report"]
    languages = ["fr", "en", "ee", None]
    return [
        {
            "country": rng.choice(countries),
            "type": rng.choice(types),
            "language": rng.choice(languages),
            "weight": rng.randint(0, 5000),
        }
        for _ in range(300)
    ]


def make_nodes(values):
    """Sibling nodes with the given aggregates, ids starting at 1."""
    return [
        HierarchyNode(node_id=i, key=f"n{i}", aggregate=v, item_count=1, parent_id=0, depth=1)
        for i, v in enumerate(values, start=1)
    ]
