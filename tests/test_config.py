from utils.config import Config, config


def test_config_is_singleton():
    assert Config() is config


def test_defaults_are_available():
    assert config.get_database_url()
    assert config.get_app_setting("TRAILING_MONTHS", 6) >= 1
    assert config.get_app_setting("UNKNOWN_SETTING", 'fallback') == 'fallback'


def test_ai_config_shape():
    ai_config = config.get_ai_config()
    assert set(ai_config) == {'api_key', 'vision_model', 'text_model', 'timeout_seconds'}


def test_unknown_feature_defaults_to_enabled():
    assert config.is_feature_enabled("SOMETHING_NEW") is True


def test_malformed_numeric_settings_keep_defaults(monkeypatch):
    monkeypatch.setenv("TRAILING_MONTHS", "six")
    monkeypatch.setenv("DEFAULT_BODY_WEIGHT_KG", "heavy")
    monkeypatch.setenv("SESSION_TIMEOUT_HOURS", "")

    config._load_app_config()
    try:
        assert config.get_app_setting("TRAILING_MONTHS") == 6
        assert config.get_app_setting("DEFAULT_BODY_WEIGHT_KG") == 70.0
        assert config.get_app_setting("SESSION_TIMEOUT_HOURS") == 8
    finally:
        monkeypatch.undo()
        config._load_app_config()


def test_timezone_setting_has_default():
    assert config.get_app_setting("TIMEZONE")
