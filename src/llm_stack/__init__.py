# src/llm_stack/__init__.py
"""
Local LLM support for goal selection.

LlamaCppBackend is not re-exported here: importing it requires llama_cpp.
"""

from .backend import LLMBackend
from .config import ModelConfig
from .goal_setter import LlmGoalProposer
from .presets import GOAL_SETTER_PRESET, RolePreset

__all__ = [
    "LLMBackend",
    "ModelConfig",
    "LlmGoalProposer",
    "GOAL_SETTER_PRESET",
    "RolePreset",
]
