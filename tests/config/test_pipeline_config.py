# tests/config/test_pipeline_config.py
import json

import pytest
import yaml

from iconsprite.config.config_service import ConfigService
from iconsprite.config.settings import DEFAULT_BASE_URL, PipelineSettings
from iconsprite.domain.sprite.entities import OverlapSeverity


def _config(tmp_path=None, data=None, env=None, suffix=".yaml"):
    path = None
    if data is not None:
        path = tmp_path / f"user{suffix}"
        if suffix == ".json":
            path.write_text(json.dumps(data), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return ConfigService(path, env=env or {})


# ───────────────────────── ConfigService ─────────────────────────
def test_bundled_defaults_loaded():
    config = _config()

    assert config.get("export.batch_size") == 50
    assert config.get("export.max_concurrency") == 5
    assert config.get("retry.max_retries") == 3
    assert config.get("api.token") is None
    assert config.get("missing.key", "fallback") == "fallback"


def test_user_file_overrides_defaults(tmp_path):
    config = _config(tmp_path, {"export": {"batch_size": 10}, "sprite": {"padding": 4}})

    assert config.get("export.batch_size") == 10
    assert config.get("export.max_concurrency") == 5
    assert config.get("sprite.padding") == 4


def test_json_user_file_supported(tmp_path):
    config = _config(tmp_path, {"raster": {"scale": 1}}, suffix=".json")
    assert config.get("raster.scale") == 1


def test_env_has_highest_priority(tmp_path):
    config = _config(
        tmp_path,
        {"export": {"batch_size": 10}},
        env={"ICONSPRITE_BATCH_SIZE": "20", "FIGMA_TOKEN": "secret", "UNRELATED": "x"},
    )

    assert config.get("export.batch_size") == "20"
    assert config.get("api.token") == "secret"


def test_missing_user_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigService(tmp_path / "nope.yaml", env={})


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigService(path, env={})


def test_section_and_as_dict_are_copies():
    config = _config()

    section = config.section("export")
    section["batch_size"] = 999
    snapshot = config.as_dict()
    snapshot["export"]["batch_size"] = 1

    assert config.get("export.batch_size") == 50
    assert config.section("nothing") == {}


# ───────────────────────── PipelineSettings ─────────────────────────
def test_settings_from_defaults():
    settings = PipelineSettings.from_config(_config())

    assert settings.api.base_url == DEFAULT_BASE_URL
    assert settings.api.token is None
    assert settings.export.batch_size == 50
    assert settings.retry.initial_delay_ms == 2000
    assert settings.raster.scale == 2
    assert settings.raster.background_color == (0, 0, 0, 0)
    assert settings.padding == 2
    assert settings.overlap_severity is OverlapSeverity.WARN
    assert settings.vector.optimize is True


def test_settings_cast_env_strings():
    settings = PipelineSettings.from_config(
        _config(env={"ICONSPRITE_BATCH_SIZE": "25", "ICONSPRITE_BASE_URL": "http://localhost:9000/"})
    )

    assert settings.export.batch_size == 25
    assert settings.api.base_url == "http://localhost:9000"


def test_token_hidden_from_repr():
    settings = PipelineSettings.from_config(_config(env={"FIGMA_TOKEN": "figd_secret"}))

    assert settings.api.token == "figd_secret"
    assert "figd_secret" not in repr(settings)


@pytest.mark.parametrize(
    "data, key",
    [
        ({"export": {"batch_size": 0}}, "export.batch_size"),
        ({"export": {"max_concurrency": "many"}}, "export.max_concurrency"),
        ({"raster": {"scale": 3}}, "raster.scale"),
        ({"raster": {"compression_level": 10}}, "raster.compression_level"),
        ({"raster": {"background_color": [0, 0, 0]}}, "raster.background_color"),
        ({"sprite": {"padding": -1}}, "sprite.padding"),
        ({"sprite": {"overlap_severity": "panic"}}, "sprite.overlap_severity"),
        ({"vector": {"optimize": "maybe"}}, "vector.optimize"),
    ],
)
def test_invalid_values_name_the_key(tmp_path, data, key):
    with pytest.raises(ValueError, match=key.replace(".", r"\.")):
        PipelineSettings.from_config(_config(tmp_path, data))


def test_invalid_retry_section_rejected(tmp_path):
    with pytest.raises(ValueError, match="retry"):
        PipelineSettings.from_config(_config(tmp_path, {"retry": {"jitter": 2}}))
