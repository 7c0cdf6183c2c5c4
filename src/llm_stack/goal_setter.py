# GoalProposer backed by a local LLM
# src/llm_stack/goal_setter.py

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from spec.types import Goal

from .backend import LLMBackend, generate_for_role
from .json_utils import parse_json_object
from .presets import GOAL_SETTER_PRESET, RolePreset

logger = logging.getLogger(__name__)


class LlmGoalProposer:
    """
    GoalProposer that asks an LLM for the next ad-hoc goal.

    Expected JSON shape from the model:

        {"name": "oak_log", "quantity": 8}

    Anything else (no JSON, missing name, non-positive quantity) is logged
    and reported as "no proposal" so the orchestrator retries later.
    """

    def __init__(
        self,
        backend: LLMBackend,
        preset: RolePreset = GOAL_SETTER_PRESET,
        history_window: int = 20,
    ) -> None:
        self._backend = backend
        self._preset = preset
        self._history_window = history_window

    def propose_goal(
        self,
        history: List[Dict[str, Any]],
        attempted_goals: Mapping[str, bool],
    ) -> Optional[Goal]:
        prompt = self.build_prompt(history, attempted_goals)
        logger.debug("Goal setter prompt: %s", prompt)

        raw = generate_for_role(self._backend, prompt, self._preset)
        logger.debug("Goal setter raw output: %s", raw)

        return self.parse_goal(raw)

    def build_prompt(
        self,
        history: List[Dict[str, Any]],
        attempted_goals: Mapping[str, bool],
    ) -> str:
        recent = history[-self._history_window:] if self._history_window > 0 else []
        lines = [f"- {entry.get('content', '')}" for entry in recent]
        attempted = {
            name: ("succeeded" if ok else "failed")
            for name, ok in attempted_goals.items()
        }
        return (
            "Recent activity:\n"
            + ("\n".join(lines) if lines else "- (nothing yet)")
            + "\n\nGoals attempted recently:\n"
            + json.dumps(attempted, ensure_ascii=False, sort_keys=True)
            + "\n\nPropose the next goal as JSON."
        )

    @staticmethod
    def parse_goal(raw: str) -> Optional[Goal]:
        data, err = parse_json_object(raw, context="goal setter")
        if data is None:
            logger.warning("Goal setter returned unparseable output: %s", err)
            return None

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            logger.warning("Goal setter output has no usable 'name': %r", data)
            return None

        quantity_raw = data.get("quantity", 1)
        try:
            quantity = int(quantity_raw)
        except (TypeError, ValueError):
            logger.warning("Goal setter output has bad quantity: %r", quantity_raw)
            return None
        if quantity < 1:
            logger.warning("Goal setter output has non-positive quantity: %r", quantity)
            return None

        return Goal(name=name.strip(), quantity=quantity)
