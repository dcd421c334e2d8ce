from __future__ import annotations

from formicarium.config import AppConfig, SimulationConfig, load_config


def test_defaults():
    config = SimulationConfig()
    assert config.tick_interval == 0.1
    assert config.arrival_threshold == 2.0
    assert config.nest_position is None
    assert config.food_sources == []
    assert config.food_count == 5
    assert config.food_amount == 100
    assert config.food_min_nest_distance == 20.0


def test_load_config_normalizes_lists():
    config = load_config(
        {
            "width": 200,
            "height": 120,
            "seed": 7,
            "nest_position": [100, 60],
            "food_sources": [
                {"id": "apple", "position": [10, 20], "amount": 3},
                {"position": [30, 40]},
            ],
            "initial_ants": [[50, 20], [44, 22]],
        }
    )

    assert config.width == 200
    assert config.seed == 7
    assert config.nest_position == (100.0, 60.0)
    assert [food.id for food in config.food_sources] == ["apple", "food-1"]
    assert config.food_sources[1].amount == 10
    assert config.food_sources[0].position == (10.0, 20.0)
    assert config.initial_ants == [(50.0, 20.0), (44.0, 22.0)]


def test_from_yaml(tmp_path):
    path = tmp_path / "sim.yaml"
    path.write_text(
        "tick_interval: 0.05\n"
        "nest_position: [5, 5]\n"
        "food_sources:\n"
        "  - id: f1\n"
        "    position: [1, 2]\n"
        "    amount: 4\n"
    )

    config = SimulationConfig.from_yaml(path)

    assert config.tick_interval == 0.05
    assert config.nest_position == (5.0, 5.0)
    assert config.food_sources[0].amount == 4


def test_app_config_from_yaml(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text("simulation:\n  width: 30\nserver:\n  port: 9000\n  client_queue_size: 4\n")

    config = AppConfig.from_yaml(path)

    assert config.simulation.width == 30
    assert config.server.port == 9000
    assert config.server.client_queue_size == 4


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert SimulationConfig.from_yaml(path) == SimulationConfig()
