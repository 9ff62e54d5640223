from pathlib import Path

from sandstone.application.config import AppConfig, resolve_config


def test_defaults(mock_home):
    config = resolve_config()

    assert config.deck_path is None
    assert config.strict_ratings is False
    assert config.default_mode == "standard"
    assert config.upcoming_days == 7
    assert config.log_dir == mock_home / ".config/sandstone/logs"


def test_env_overrides(mock_home, monkeypatch):
    monkeypatch.setenv("SANDSTONE_STRICT_RATINGS", "true")
    monkeypatch.setenv("SANDSTONE_UPCOMING_DAYS", "14")

    config = resolve_config()

    assert config.strict_ratings is True
    assert config.upcoming_days == 14


def test_toml_file_is_loaded(mock_home):
    cfg = mock_home / ".config/sandstone/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('default_mode = "cram"\nupcoming_days = 3\n', encoding="utf-8")

    config = resolve_config()

    assert config.default_mode == "cram"
    assert config.upcoming_days == 3


def test_precedence_cli_over_env_over_toml(mock_home, monkeypatch):
    cfg = mock_home / ".sandstone.toml"
    cfg.write_text("upcoming_days = 3\nshuffle_seed = 1\n", encoding="utf-8")
    monkeypatch.setenv("SANDSTONE_UPCOMING_DAYS", "10")

    config = resolve_config({"shuffle_seed": 99, "deck_path": None})

    assert config.upcoming_days == 10
    assert config.shuffle_seed == 99


def test_deck_path_is_resolved(mock_home, tmp_path):
    config = AppConfig(deck_path=str(tmp_path / "decks" / ".." / "bio.yaml"))
    assert config.deck_path == (tmp_path / "bio.yaml").resolve()
    assert isinstance(config.deck_path, Path)
