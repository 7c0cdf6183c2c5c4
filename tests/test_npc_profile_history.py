#tests/test_npc_profile_history.py
"""
Tests for npc.profile and npc.history.

Covers:
- Profile YAML persistence (goals, built instances, flags)
- tolerant parsing of bare-name goals and missing keys
- AgentHistory JSONL saving only appends unsaved entries
- TransitionLogger fan-out (history + bus)
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from construction.geometry import Orientation
from construction.schema import BuiltInstance
from monitoring.bus import EventBus
from monitoring.events import EventType
from npc.history import AgentHistory, TransitionLogger
from npc.profile import Profile, load_profile, save_profile
from spec.types import Goal, Position


def test_profile_save_and_load(tmp_path: Path):
    profile = Profile(
        goals=[Goal("small_house"), Goal("bread", 4)],
        curr_goal=Goal("oak_log", 8),
        built={"small_house": BuiltInstance("small_house", Position(10, 64, 10), Orientation.DEG_90)},
        home="small_house",
        do_routine=True,
    )
    path = tmp_path / "npc" / "profile.yaml"

    save_profile(profile, path)
    loaded = load_profile(path)

    assert loaded.goals == profile.goals
    assert loaded.curr_goal == Goal("oak_log", 8)
    assert loaded.built["small_house"].position == Position(10, 64, 10)
    assert loaded.built["small_house"].orientation is Orientation.DEG_90
    assert loaded.home == "small_house"
    assert loaded.do_routine is True
    assert loaded.do_set_goal is False


def test_profile_from_dict_accepts_bare_names():
    profile = Profile.from_dict({"goals": ["torch", {"name": "bread", "quantity": 2}]})

    assert profile.goals == [Goal("torch", 1), Goal("bread", 2)]
    assert profile.curr_goal is None
    assert profile.built == {}


def test_missing_profile_file_gives_empty_profile(tmp_path: Path):
    profile = load_profile(tmp_path / "absent.yaml")

    assert profile.goals == []
    assert profile.home is None


def test_profile_root_must_be_mapping(tmp_path: Path):
    path = tmp_path / "profile.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_profile(path)


def test_history_save_appends_only_new_entries(tmp_path: Path):
    path = tmp_path / "history.jsonl"
    history = AgentHistory(path=path)

    history.add("Set new goal: oak_log x4")
    history.add("Going to bed")
    assert history.save() == 2
    assert history.save() == 0

    history.add("Exiting home")
    assert history.save() == 1

    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["content"] for line in lines] == [
        "Set new goal: oak_log x4",
        "Going to bed",
        "Exiting home",
    ]


def test_history_without_path_does_not_write():
    history = AgentHistory()
    history.add("hello")

    assert history.save() == 0
    assert len(history) == 1
    assert history.get_history(limit=0) == []
    assert history.get_history(limit=5)[0]["role"] == "system"


def test_transition_logger_records_history_and_publishes():
    bus = EventBus()
    received = []
    bus.subscribe(received.append)
    history = AgentHistory()

    TransitionLogger(history=history, bus=bus).log(
        "npc.routine",
        "Going to bed",
        EventType.BEDTIME,
        {"home": "small_house"},
    )

    assert history.get_history()[-1]["content"] == "Going to bed"
    assert len(received) == 1
    assert received[0].event_type == EventType.BEDTIME
    assert received[0].payload == {"home": "small_house"}
