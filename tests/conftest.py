"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import json

import pytest

from regionfinder import BuildConfig, CacheBuilder, RegionCache, RegionFinder
from tests.auxiliaries import coarse_dataset, fine_dataset


def pytest_configure(config):
    """
    Register custom markers for different types of tests.
    """
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "examples: mark test as example script test")
    config.addinivalue_line(
        "markers", "slow: mark test as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture(scope="session")
def coarse_collection() -> dict:
    return coarse_dataset()


@pytest.fixture(scope="session")
def fine_collection() -> dict:
    return fine_dataset()


@pytest.fixture(scope="session")
def fine_dataset_file(tmp_path_factory, fine_collection):
    """the fine dataset as GeoJSON file"""
    path = tmp_path_factory.mktemp("source") / "fine.geojson"
    path.write_text(json.dumps(fine_collection), encoding="utf-8")
    return path


@pytest.fixture(scope="session")
def coarse_cache(coarse_collection) -> RegionCache:
    """Coarse cache built once per session."""
    config = BuildConfig(dataset="ned", workers=1)
    return CacheBuilder(config).build_cache(coarse_collection)


@pytest.fixture(scope="session")
def fine_cache(fine_collection) -> RegionCache:
    """Fine cache built once per session."""
    config = BuildConfig(dataset="osm_tz", workers=1)
    return CacheBuilder(config).build_cache(fine_collection)


@pytest.fixture(scope="session")
def fine_artifact(fine_collection) -> bytes:
    config = BuildConfig(dataset="osm_tz", workers=1)
    return CacheBuilder(config).build_bytes(fine_collection)


@pytest.fixture(scope="session")
def coarse_finder(coarse_cache) -> RegionFinder:
    return RegionFinder(coarse_cache)


@pytest.fixture(scope="session")
def fine_finder(fine_cache) -> RegionFinder:
    return RegionFinder(fine_cache)
