"""Tests for SimulationConfig."""

import logging

import pytest

from imperium.core.config import SimulationConfig
from imperium.core.engine import Simulator
from imperium.core.factions import DEFAULT_PROFILES, Faction


class TestConfigDefaults:
    def test_default_dimensions(self):
        c = SimulationConfig()
        assert (c.depth, c.width) == (80, 120)

    def test_default_creation_order(self):
        c = SimulationConfig()
        order = c.creation_order()
        assert [f for f, _ in order] == [
            Faction.BRITISH, Faction.ROMAN, Faction.PERSIAN,
            Faction.SPANISH, Faction.CIVILIAN, Faction.AMAZONIAN,
        ]
        assert dict(order)[Faction.CIVILIAN] == 0.10

    def test_default_environment(self):
        c = SimulationConfig()
        assert c.snow_move_probability == 0.5
        assert c.weather_change_interval == 15
        assert c.civilian_repopulation_probability == 0.01
        assert (c.start_hour, c.start_minute, c.minutes_per_step) == (10, 30, 5)

    def test_default_profiles(self):
        assert SimulationConfig().profiles() == DEFAULT_PROFILES


class TestFactionOverrides:
    def test_override_applies(self):
        c = SimulationConfig(faction_overrides={"Roman": {"full_resource": 40}})
        assert c.profiles()[Faction.ROMAN].full_resource == 40
        assert c.profiles()[Faction.BRITISH] == DEFAULT_PROFILES[Faction.BRITISH]

    def test_invalid_override_dropped(self, caplog):
        c = SimulationConfig(faction_overrides={
            "Roman": {"no_such_field": 1},
            "Spanish": {"max_children": 2},
        })
        with caplog.at_level(logging.WARNING):
            v = c.validated()
        assert "Roman" not in v.faction_overrides
        assert v.faction_overrides["Spanish"] == {"max_children": 2}
        assert "Roman" in caplog.text

    @pytest.mark.parametrize("values", [
        {"max_age": 0},
        {"min_breeding_age": -1},
        {"birth_probability": 7.5},
        {"birth_probability": -0.1},
        {"max_children": 0},
        {"max_recruits": -2},
        {"full_resource": -10},
        {"active_hours": [[6, 25]]},
        {"active_hours": [[-1, 12]]},
        {"sexes": ["X"]},
        {"rainy_executions": 0},
        {"sunny_attack_radius": 0},
    ])
    def test_out_of_range_override_dropped(self, values, caplog):
        c = SimulationConfig(faction_overrides={"Persian": values})
        with caplog.at_level(logging.WARNING):
            v = c.validated()
        assert v.faction_overrides == {}
        assert v.profiles()[Faction.PERSIAN] == DEFAULT_PROFILES[Faction.PERSIAN]
        assert "Persian" in caplog.text

    def test_malformed_active_hours_dropped(self):
        c = SimulationConfig(faction_overrides={"British": {"active_hours": [[6]]}})
        assert c.validated().faction_overrides == {}

    def test_in_range_override_kept(self):
        values = {"birth_probability": 1.0, "max_children": 1, "active_hours": [[0, 24]]}
        c = SimulationConfig(faction_overrides={"Amazonian": values})
        assert c.validated().faction_overrides == {"Amazonian": values}

    def test_simulator_survives_zero_max_age(self, caplog):
        config = SimulationConfig(
            depth=5, width=5, random_seed=1,
            creation_probabilities={"Civilian": 1.0},
            faction_overrides={"Civilian": {"max_age": 0}},
        )
        with caplog.at_level(logging.WARNING):
            sim = Simulator(config)
        assert sim.profiles[Faction.CIVILIAN].max_age == 100
        assert sim.stats()["Civilian"] == 25

    def test_simulator_survives_zero_litter(self):
        config = SimulationConfig(
            depth=5, width=5, random_seed=1,
            creation_probabilities={"Amazonian": 1.0},
            faction_overrides={"Amazonian": {"max_children": 0, "birth_probability": 1.0}},
        )
        sim = Simulator(config)
        sim.step()
        assert sim.profiles[Faction.AMAZONIAN].max_children == 1


class TestValidation:
    def test_valid_config_unchanged(self, caplog):
        c = SimulationConfig(depth=10, width=12, random_seed=3)
        with caplog.at_level(logging.WARNING):
            v = c.validated()
        assert v == c
        assert caplog.text == ""

    def test_bad_dimensions(self, caplog):
        with caplog.at_level(logging.WARNING):
            v = SimulationConfig(depth=0, width=-5).validated()
        assert (v.depth, v.width) == (80, 120)
        assert "dimensions" in caplog.text

    def test_bad_probability(self):
        v = SimulationConfig(snow_move_probability=1.5).validated()
        assert v.snow_move_probability == 0.5

    def test_unknown_faction_in_creation_probabilities(self, caplog):
        c = SimulationConfig(creation_probabilities={"Viking": 0.5, "Civilian": 0.2})
        with caplog.at_level(logging.WARNING):
            v = c.validated()
        assert v.creation_probabilities == {"Civilian": 0.2}
        assert "Viking" in caplog.text

    def test_out_of_range_creation_probability_zeroed(self):
        c = SimulationConfig(creation_probabilities={"Civilian": 2.0})
        assert c.validated().creation_probabilities == {"Civilian": 0.0}

    def test_non_positive_intervals(self):
        v = SimulationConfig(weather_change_interval=0, minutes_per_step=-1).validated()
        assert v.weather_change_interval == 15
        assert v.minutes_per_step == 5

    def test_bad_start_time(self):
        v = SimulationConfig(start_hour=25, start_minute=10).validated()
        assert (v.start_hour, v.start_minute) == (10, 30)

    def test_validation_does_not_mutate(self):
        c = SimulationConfig(depth=-1)
        c.validated()
        assert c.depth == -1


class TestSerialization:
    def test_to_dict_roundtrip(self):
        c = SimulationConfig(experiment_name="test", depth=30, random_seed=9)
        c2 = SimulationConfig.from_dict(c.to_dict())
        assert c2 == c

    def test_to_json_roundtrip(self):
        c = SimulationConfig(
            experiment_name="json_test",
            faction_overrides={"British": {"active_hours": [[0, 24]]}},
        )
        c2 = SimulationConfig.from_json(c.to_json())
        assert c2.experiment_name == "json_test"
        assert c2.profiles()[Faction.BRITISH].active_hours == ((0, 24),)

    def test_to_dict_copies_nested(self):
        c = SimulationConfig()
        d = c.to_dict()
        d["creation_probabilities"]["Civilian"] = 0.9
        assert c.creation_probabilities["Civilian"] == 0.10

    def test_unknown_key_raises(self):
        with pytest.raises(TypeError):
            SimulationConfig.from_dict({"no_such_param": 1})

    def test_private_keys_ignored(self):
        c = SimulationConfig.from_dict({"_comment": "notes", "depth": 7})
        assert c.depth == 7

    def test_diff(self):
        c1 = SimulationConfig()
        c2 = SimulationConfig(depth=10, snow_move_probability=0.2)
        diffs = c1.diff(c2)
        assert diffs == {"depth": (80, 10), "snow_move_probability": (0.5, 0.2)}
