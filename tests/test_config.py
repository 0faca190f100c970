import config


def test_settings_from_config_json(monkeypatch):
    monkeypatch.delenv("RECEIPT_COLUMNS", raising=False)
    config.get_settings.cache_clear()
    settings = config.get_settings()
    assert settings.issuer.name == "Green Acres Agro Agencies"
    assert settings.receipt_columns == 48
    assert settings.display_timezone == "Asia/Kolkata"
    config.get_settings.cache_clear()


def test_env_overrides_json(monkeypatch):
    monkeypatch.setenv("RECEIPT_COLUMNS", "42")
    monkeypatch.setenv("PRINT_SETTLE_MS", "900")
    config.get_settings.cache_clear()
    settings = config.get_settings()
    assert settings.receipt_columns == 42
    assert settings.print_settle_ms == 900
    config.get_settings.cache_clear()


def test_defaults_without_json():
    settings = config.Settings()
    assert settings.issuer.name == "Storefront"
    assert settings.item_name_max_chars == 25
    assert settings.receipt_dpi == 203
