"""Shared fixtures. Tests import ``concatkit`` from the in-repo ``src/``."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

UNIT_TEST_TIMEOUT_SECONDS = 120
SRC_DIR = str(Path(__file__).resolve().parents[1] / "src")


def pytest_configure() -> None:
    if SRC_DIR not in sys.path:
        sys.path.insert(0, SRC_DIR)


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    # Integration tests run unbounded; everything else gets a timeout.
    for item in items:
        if item.get_closest_marker("integration") is None:
            item.add_marker(pytest.mark.timeout(UNIT_TEST_TIMEOUT_SECONDS))


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def optimizer(clock: FakeClock):
    from concatkit.concatenation.cache import OptimizationCache
    from concatkit.concatenation.optimizer import TextRunOptimizer

    return TextRunOptimizer(OptimizationCache(max_entries=10, clock=clock))


@pytest.fixture()
def renderer(optimizer):
    from concatkit.concatenation.renderer import CompositeRenderer

    return CompositeRenderer(optimizer)
