# src/llm_stack/backend_llamacpp.py
"""
llama.cpp implementation of LLMBackend for the goal setter.

Only this module imports llama_cpp (install with `pip install .[llm]`).
The GGUF model is loaded on the first generate() call, so building the NPC
runtime stays fast and a bad model path surfaces where it is used.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from llama_cpp import Llama

from .config import ModelConfig

logger = logging.getLogger(__name__)


def _default_threads() -> int:
    return max(1, (os.cpu_count() or 2) - 1)


class LlamaCppBackend:
    def __init__(self, config: ModelConfig) -> None:
        self.config = config
        self._llm: Optional[Llama] = None

    @property
    def loaded(self) -> bool:
        return self._llm is not None

    def _model(self) -> Llama:
        if self._llm is None:
            path = Path(self.config.model_path)
            if not path.is_file():
                raise FileNotFoundError(f"Goal model not found: {path}")
            logger.info("Loading llama.cpp model %s", path.name)
            self._llm = Llama(
                model_path=str(path),
                n_ctx=self.config.n_ctx,
                # -1 offloads every layer llama.cpp can fit on the GPU
                n_gpu_layers=-1 if self.config.n_gpu_layers is None else self.config.n_gpu_layers,
                n_threads=self.config.n_threads or _default_threads(),
                n_batch=self.config.n_batch or 512,
                verbose=False,
            )
        return self._llm

    def generate(
        self,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        stop: Optional[List[str]] = None,
        system_prompt: Optional[str] = None,
    ) -> str:
        messages: List[Dict[str, Any]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = self._model().create_chat_completion(
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature,
            stop=stop or None,
        )
        choices = response.get("choices") or []
        if not choices:
            logger.warning("llama.cpp returned no choices")
            return ""
        content = choices[0].get("message", {}).get("content")
        return (content or "").strip()
