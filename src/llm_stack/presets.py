# src/llm_stack/presets.py

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class RolePreset:
    """Configuration for a logical LLM role."""
    name: str
    temperature: float
    max_tokens: int
    system_prompt: Optional[str] = None
    stop: Optional[List[str]] = None


GOAL_SETTER_SYSTEM_PROMPT = (
    "You choose the next goal for a Minecraft villager. "
    "Reply with a single JSON object: "
    '{"name": "<item or structure name>", "quantity": <positive integer>}. '
    "Prefer goals that were not attempted recently or that failed before "
    "for a reason that has since been fixed."
)

GOAL_SETTER_PRESET = RolePreset(
    name="goal_setter",
    temperature=0.7,
    max_tokens=128,
    system_prompt=GOAL_SETTER_SYSTEM_PROMPT,
)
