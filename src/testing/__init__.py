# src/testing/__init__.py

"""
In-memory fakes for offline NPC tests and demos.

This package provides:

- FakeBody: world queries, motor skills and agent control in one object
- FakeItemExecutor / FakeBuildExecutor: scripted goal executors
- FakeGoalProposer / FakeLLMBackend: deterministic goal selection
"""

from .fakes import (
    FakeBody,
    FakeBuildExecutor,
    FakeGoalProposer,
    FakeItemExecutor,
    FakeLLMBackend,
)

__all__ = [
    "FakeBody",
    "FakeBuildExecutor",
    "FakeGoalProposer",
    "FakeItemExecutor",
    "FakeLLMBackend",
]
