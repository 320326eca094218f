import pytest

from handsynth.config import (
    DFLT_CONFIG_PATH,
    Cfg,
    MappingConfig,
    config_from_dict,
    load_config,
)


def test_defaults():
    cfg = load_config()
    assert cfg.tracker.max_num_hands == 2
    assert cfg.tracker.min_detection_confidence == 0.7
    assert cfg.gestures.pinch_threshold == 0.1
    assert cfg.mapping.volume_distance_range == (0.2, 0.8)
    assert cfg.mapping.frequency_band == (220.0, 660.0)
    assert cfg.control.initial_mode == 'AudioEqualizer'
    assert (cfg.camera.width, cfg.camera.height) == (800, 480)


def test_shipped_default_file_matches_defaults():
    assert load_config(str(DFLT_CONFIG_PATH)) == Cfg()


def test_partial_yaml_overrides_only_its_keys(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text(
        "mapping:\n"
        "  frequency_band: [220, 880]\n"
        "gestures:\n"
        "  pinch_threshold: 0.08\n"
    )
    cfg = load_config(path)
    assert cfg.mapping.frequency_band == (220.0, 880.0)
    assert cfg.gestures.pinch_threshold == 0.08
    assert cfg.mapping.base_frequency == 440.0
    assert cfg.camera == Cfg().camera


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / 'empty.yaml'
    path.write_text("")
    assert load_config(path) == Cfg()


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config('/no/such/handsynth.yaml')


@pytest.mark.parametrize(
    "data",
    [
        {'mapping': {'frequency_band': [660, 220]}},
        {'mapping': {'frequency_band': [0, 220]}},
        {'mapping': {'frequency_band': [220, 440, 660]}},
        {'mapping': {'volume_distance_range': [0.8, 0.2]}},
        {'mapping': {'reset_volume': 1.5}},
        {'gestures': {'pinch_threshold': 0}},
        {'tracker': {'max_num_hands': 1}},
        {'tracker': {'min_tracking_confidence': 1.2}},
        {'control': {'initial_mode': 'Karaoke'}},
        {'control': {'initial_frequency': -440}},
        {'mapping': {'frequency_bands': [220, 880]}},
        {'audio': {'volume': 1}},
        {'mapping': 5},
        {'mapping': {'frequency_band': 880}},
        {'mapping': {'base_frequency': 'high'}},
        {'tracker': ['max_num_hands']},
    ],
)
def test_invalid_config_raises_value_error(data):
    with pytest.raises(ValueError):
        config_from_dict(data).validate()


def test_non_mapping_config_raises_value_error():
    with pytest.raises(ValueError):
        config_from_dict(['mapping'])


def test_mapping_config_defaults_are_independent():
    a, b = Cfg(), Cfg()
    a.mapping.reset_volume = 0.1
    assert b.mapping == MappingConfig()


def test_empty_section_keeps_defaults():
    assert config_from_dict({'mapping': None}) == Cfg()
