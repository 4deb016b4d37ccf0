"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session, and a reset of
the process-wide render configuration around every test.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. The kernel module
    allocates its fields on import, so it must be imported inside tests.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def reset_render_config():
    """Restore the default RenderConfig after each test.

    This ensures tests that tweak tolerances or depth are isolated.
    """
    from src.whitted.core.config import RenderConfig, set_config

    previous = set_config(RenderConfig())
    yield
    set_config(previous)
