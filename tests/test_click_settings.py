import json

import pytest

from gridpoint.domain.models.click_config import ClickConfig, DisplayPolicy
from gridpoint.infrastructure.config.click_settings_service import ClickSettingsService
from gridpoint.infrastructure.config.json_config_repository import JsonConfigRepository


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "gridpoint" / "config.json"


def write_config(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


def test_defaults():
    config = ClickConfig()
    assert (config.rows, config.cols) == (6, 10)
    assert config.zoom_factor == 3.0
    assert config.padding_fraction == 0.5
    assert config.display_policy == DisplayPolicy.LARGEST
    assert config.cooldown_ms == 1000
    assert config.grid.cell_count == 60


def test_from_mapping_missing_keys_take_defaults():
    config, errors = ClickConfig.from_mapping({"rows": 4})
    assert errors == []
    assert config.rows == 4
    assert config.cols == 10


@pytest.mark.parametrize("key,value", [
    ("rows", 0), ("cols", -3), ("rows", "many"), ("rows", True), ("rows", 2.5),
    ("zoom_factor", 0.5), ("padding_fraction", -1), ("display_policy", "smallest"),
    ("cooldown_ms", 60000), ("click_button", 4), ("inject_clicks", "maybe"),
])
def test_invalid_values_fall_back(key, value):
    fallback = ClickConfig(rows=8, cols=12, zoom_factor=2.0, cooldown_ms=300)
    config, errors = ClickConfig.from_mapping({key: value}, fallback=fallback)
    assert len(errors) == 1
    assert errors[0].code == "InvalidSetting"
    assert errors[0].details["key"] == key
    assert getattr(config, key) == getattr(fallback, key)


def test_to_dict_round_trips_through_json():
    config = ClickConfig(display_policy=DisplayPolicy.INDEX, display_index=1)
    data = json.loads(json.dumps(config.to_dict()))
    assert data["display_policy"] == "index"
    rebuilt, errors = ClickConfig.from_mapping(data)
    assert errors == []
    assert rebuilt == config


def test_with_overrides_ignores_none():
    config = ClickConfig().with_overrides(rows=3, cols=None)
    assert (config.rows, config.cols) == (3, 10)


class TestJsonConfigRepository:

    def test_missing_file_is_created_with_defaults(self, config_path, logger):
        repo = JsonConfigRepository(str(config_path), logger)
        result = repo.load_config()
        assert result.is_success
        assert result.value == ClickConfig().to_dict()
        assert json.loads(config_path.read_text()) == ClickConfig().to_dict()

    def test_missing_keys_are_merged(self, config_path, logger):
        write_config(config_path, {"rows": 3})
        repo = JsonConfigRepository(str(config_path), logger)
        config = repo.load_config().value
        assert config["rows"] == 3
        assert config["cols"] == 10
        assert json.loads(config_path.read_text())["cols"] == 10

    def test_corrupt_file_is_a_configuration_error(self, config_path, logger):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{not json")
        result = JsonConfigRepository(str(config_path), logger).load_config()
        assert result.is_failure
        assert "Error loading config" in result.error.message

    def test_non_object_is_rejected(self, config_path, logger):
        write_config(config_path, [1, 2, 3])
        assert JsonConfigRepository(str(config_path), logger).load_config().is_failure

    def test_save_persists_and_notifies(self, config_path, logger):
        repo = JsonConfigRepository(str(config_path), logger)
        calls = []
        repo.register_observer(lambda: calls.append(True))

        config = dict(repo.load_config().value, cols=12)
        assert repo.save_config(config).is_success
        assert repo.load_config(force_reload=True).value["cols"] == 12
        assert json.loads(config_path.read_text())["cols"] == 12
        assert calls
        assert not (config_path.parent / "config.json.tmp").exists()


class TestClickSettingsService:

    def test_snapshot_from_file(self, config_path, logger):
        write_config(config_path, {"rows": 4, "cols": 8, "cooldown_ms": 250})
        settings = ClickSettingsService(JsonConfigRepository(str(config_path), logger), logger)
        snapshot = settings.get_snapshot()
        assert (snapshot.rows, snapshot.cols, snapshot.cooldown_ms) == (4, 8, 250)

    def test_invalid_edit_keeps_last_known_good(self, config_path, logger):
        write_config(config_path, {"rows": 4})
        repo = JsonConfigRepository(str(config_path), logger)
        settings = ClickSettingsService(repo, logger)

        repo.save_config(dict(repo.load_config().value, rows=0))
        repo.save_config(dict(repo.load_config().value, cols=20))

        snapshot = settings.get_snapshot()
        assert snapshot.rows == 4
        assert snapshot.cols == 20
        assert any("rows" in message for message in logger.messages("error"))

    def test_unreadable_file_keeps_defaults(self, config_path, logger):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("][")
        settings = ClickSettingsService(JsonConfigRepository(str(config_path), logger), logger)
        assert settings.get_snapshot() == ClickConfig()

    def test_overrides_apply_on_top_of_file(self, config_path, logger):
        write_config(config_path, {"rows": 4, "cols": 8})
        settings = ClickSettingsService(JsonConfigRepository(str(config_path), logger), logger)
        settings.set_overrides(cols=5, display_policy="index", display_index=1,
                               inject_clicks=None, bogus=3)

        snapshot = settings.get_snapshot()
        assert (snapshot.rows, snapshot.cols) == (4, 5)
        assert snapshot.display_policy == DisplayPolicy.INDEX
        assert snapshot.display_index == 1
        assert snapshot.inject_clicks is True
        assert any("bogus" in message for message in logger.messages("warning"))
        # overrides are never written back
        assert json.loads(config_path.read_text())["cols"] == 8

    def test_invalid_override_is_ignored(self, config_path, logger):
        write_config(config_path, {"rows": 4})
        settings = ClickSettingsService(JsonConfigRepository(str(config_path), logger), logger)
        settings.set_overrides(rows=500, cols=7)
        snapshot = settings.get_snapshot()
        assert (snapshot.rows, snapshot.cols) == (4, 7)

    def test_rejected_display_index_drops_the_index_policy(self, config_path, logger):
        write_config(config_path, {"display_policy": "largest"})
        settings = ClickSettingsService(JsonConfigRepository(str(config_path), logger), logger)
        settings.set_overrides(display_policy="index", display_index=-1)

        snapshot = settings.get_snapshot()
        assert snapshot.display_policy == DisplayPolicy.LARGEST
        assert any("display_policy" in message for message in logger.messages("error"))

    def test_large_display_index_is_kept_for_the_resolver(self, config_path, logger):
        write_config(config_path, {"display_policy": "index", "display_index": 64})
        settings = ClickSettingsService(JsonConfigRepository(str(config_path), logger), logger)
        snapshot = settings.get_snapshot()
        assert snapshot.display_policy == DisplayPolicy.INDEX
        assert snapshot.display_index == 64

        settings.set_overrides(display_policy="index", display_index=69)
        assert settings.get_snapshot().display_index == 69
