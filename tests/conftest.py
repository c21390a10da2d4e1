"""
tests/conftest.py

Configuration for pytest.
"""

from pathlib import Path

import pytest

from cssom_regression.data_models.snapshot import Snapshot
from fakes import FakeInstrumentationSession, el, make_node


@pytest.fixture(scope="session")
def tests_root() -> Path:
    """
    Root directory for tests.
    Returns:
        Path to the tests directory.
    """
    return Path(__file__).parent.resolve()


@pytest.fixture(scope="session")
def data_dir(tests_root: Path) -> Path:
    """
    Directory containing test data files.
    Returns:
        Path to tests/data.
    """
    return tests_root / "data"


@pytest.fixture
def page_with_script() -> FakeInstrumentationSession:
    """`<body><div>x</div><script src="a.js"></script></body>`"""
    return FakeInstrumentationSession(
        el(
            "body",
            el("div", "x", styles={"color": "rgb(0, 0, 0)"}),
            el("script", attributes={"src": "a.js"}, styles={"display": "none"}),
            styles={"margin": "8px"},
        )
    )


@pytest.fixture
def sample_snapshot() -> Snapshot:
    """A small two-level snapshot with attributes and a pseudo-state."""
    return Snapshot(
        url="http://localhost:3000/",
        trees=[
            make_node(
                "body",
                make_node("div", index=0, styles={"color": "red"}, attributes={"class": "card"}),
                make_node(
                    "a",
                    index=1,
                    styles={"color": "blue"},
                    attributes={"href": "/home"},
                    pseudo_states={"hover": {"color": "navy"}},
                ),
                styles={"margin": "8px"},
            )
        ],
    )
