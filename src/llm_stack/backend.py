# src/llm_stack/backend.py
"""
Text-generation seam used by the goal setter.

LlamaCppBackend (backend_llamacpp) is the production implementation;
tests pass testing.fakes.FakeLLMBackend. Keeping the protocol here means
nothing outside backend_llamacpp needs llama_cpp installed.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from .presets import RolePreset


class LLMBackend(Protocol):
    def generate(
        self,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        stop: Optional[List[str]] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        """Return the model's reply to `prompt` as plain text."""
        ...


def generate_for_role(backend: LLMBackend, prompt: str, preset: RolePreset) -> str:
    """Call `backend` with the sampling knobs and system prompt of `preset`."""
    return backend.generate(
        prompt,
        max_tokens=preset.max_tokens,
        temperature=preset.temperature,
        stop=preset.stop,
        system_prompt=preset.system_prompt,
    )
