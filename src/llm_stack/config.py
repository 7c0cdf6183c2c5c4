# src/llm_stack/config.py

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional


@dataclass
class ModelConfig:
    """
    Local goal-setter model, as written under `goal_model:` in npc.yaml.

    Goal proposals are one short JSON object, so the defaults favor a
    small generation budget over a long context.
    """

    model_path: str

    max_tokens: int = 128
    temperature: float = 0.7

    n_ctx: int = 4096
    n_gpu_layers: Optional[int] = None   # None: offload everything that fits
    n_threads: Optional[int] = None      # None: all cores but one
    n_batch: Optional[int] = None

    stop: Optional[List[str]] = None
    system_prompt: Optional[str] = None  # None: the built-in goal-setter prompt

    def __post_init__(self) -> None:
        if self.max_tokens < 1:
            raise ValueError(f"goal_model.max_tokens must be >= 1, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError(f"goal_model.temperature must be within 0..2, got {self.temperature}")
        if self.n_ctx < self.max_tokens:
            raise ValueError("goal_model.n_ctx must be at least max_tokens")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelConfig":
        """
        Build from a YAML mapping.

        Raises:
            ValueError: on a missing model_path or an unknown key.
        """
        if not data.get("model_path"):
            raise ValueError("goal_model requires a 'model_path'")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown goal_model keys: {', '.join(unknown)}")

        raw = dict(data)
        raw["model_path"] = str(raw["model_path"])
        for key in ("max_tokens", "n_ctx", "n_gpu_layers", "n_threads", "n_batch"):
            if raw.get(key) is not None:
                raw[key] = int(raw[key])
        if "temperature" in raw:
            raw["temperature"] = float(raw["temperature"])
        return cls(**raw)
