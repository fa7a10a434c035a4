"""StarRadar testing utilities.

Provides an in-memory fake GitHub and factories for testing code built on
StarRadar.
"""

from starradar.testing.fake import FakeGitHub, InjectedError, MockCall
from starradar.testing.fixtures import (
    create_mock_repository,
    make_starred_payloads,
    repo_payload,
    starred_entry,
)

__all__ = [
    # Fake upstream
    "FakeGitHub",
    "MockCall",
    "InjectedError",
    # Helper functions
    "repo_payload",
    "starred_entry",
    "make_starred_payloads",
    "create_mock_repository",
]
