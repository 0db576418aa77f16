"""Shared pytest fixtures for the tinyparse test suite."""

from __future__ import annotations

import pytest


class Recorder:
    """A callback that remembers every substring it was called with."""

    def __init__(self, events: list[tuple[str, str]] | None = None, tag: str = "") -> None:
        self.events: list[tuple[str, str]] = [] if events is None else events
        self.tag = tag

    def __call__(self, matched: str) -> None:
        self.events.append((self.tag, matched))

    @property
    def calls(self) -> list[str]:
        return [matched for tag, matched in self.events if tag == self.tag]

    def tagged(self, tag: str) -> Recorder:
        """Another recorder writing to the same event log, so ordering can be checked."""
        return Recorder(self.events, tag)


@pytest.fixture
def recorder():
    return Recorder()
