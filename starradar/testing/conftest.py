"""
Pytest plugin for StarRadar testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["starradar.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from starradar.testing.fixtures import fake_github, sample_repository, starradar_client

__all__ = [
    "fake_github",
    "starradar_client",
    "sample_repository",
]
