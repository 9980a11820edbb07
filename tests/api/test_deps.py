"""
Tests for dependency providers that hold app-lifetime resources.
"""

from __future__ import annotations

import pytest

from src.api import deps
from src.rules.models import Rules


@pytest.fixture(autouse=True)
def fresh_probe():
    deps.close_remote_probe()
    yield
    deps.close_remote_probe()


class TestRemoteProbeProvider:
    def test_probe_is_shared_between_requests(self, rules: Rules) -> None:
        first = deps.get_remote_probe(rules)
        second = deps.get_remote_probe(rules)

        assert first is second
        assert first.timeout == rules.embeds.timeout_seconds

    def test_close_releases_pool_and_resets(self, rules: Rules) -> None:
        probe = deps.get_remote_probe(rules)

        deps.close_remote_probe()

        assert probe.closed
        assert deps.get_remote_probe(rules) is not probe

    def test_close_without_probe_is_noop(self) -> None:
        deps.close_remote_probe()
        deps.close_remote_probe()
