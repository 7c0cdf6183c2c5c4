#tests/test_llm_support.py
"""
Tests for the llm_stack helpers that do not need llama_cpp.

Covers:
- JSON salvage from noisy model replies
- ModelConfig parsing and validation
- generate_for_role forwards preset knobs
"""

from __future__ import annotations

import pytest

from llm_stack.backend import generate_for_role
from llm_stack.config import ModelConfig
from llm_stack.json_utils import first_json_object, parse_json_object
from llm_stack.presets import RolePreset
from testing.fakes import FakeLLMBackend


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('{"name": "bread"}', '{"name": "bread"}'),
        ('```json\n{"name": "bread", "quantity": 2}\n```', '{"name": "bread", "quantity": 2}'),
        ('Goal: {"name": "sign", "text": "a } b"} and {"x": 1}', '{"name": "sign", "text": "a } b"}'),
        ('{"outer": {"inner": 1}} trailing', '{"outer": {"inner": 1}}'),
        ('{ unbalanced {"name": "torch"}', '{"name": "torch"}'),
        ("no braces at all", None),
        ("", None),
    ],
)
def test_first_json_object(raw, expected):
    assert first_json_object(raw) == expected


def test_parse_json_object_reports_errors():
    data, err = parse_json_object('{"name": bread}', context="test")
    assert data is None
    assert err.startswith("test:")

    data, err = parse_json_object('reply: {"name": "bread"}', context="test")
    assert data == {"name": "bread"}
    assert err is None


def test_model_config_from_dict_coerces_numbers():
    cfg = ModelConfig.from_dict(
        {"model_path": "models/goal.gguf", "max_tokens": "64", "temperature": "0.3", "n_gpu_layers": 20}
    )

    assert cfg.max_tokens == 64
    assert cfg.temperature == 0.3
    assert cfg.n_gpu_layers == 20
    assert cfg.n_threads is None


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"model_path": ""},
        {"model_path": "m.gguf", "top_k": 40},
        {"model_path": "m.gguf", "temperature": 3.5},
        {"model_path": "m.gguf", "max_tokens": 0},
        {"model_path": "m.gguf", "max_tokens": 512, "n_ctx": 256},
    ],
)
def test_model_config_rejects_bad_values(data):
    with pytest.raises(ValueError):
        ModelConfig.from_dict(data)


def test_generate_for_role_forwards_preset():
    backend = FakeLLMBackend(["ok"])
    preset = RolePreset(name="goal_setter", temperature=0.2, max_tokens=16, system_prompt="sys", stop=["\n\n"])

    assert generate_for_role(backend, "hello", preset) == "ok"
    assert backend.prompts == [
        {"prompt": "hello", "max_tokens": 16, "temperature": 0.2, "stop": ["\n\n"], "system_prompt": "sys"}
    ]
