from datetime import datetime, timezone

import pytest
import yaml


@pytest.fixture
def now():
    """A fixed reference time so scheduling results are deterministic."""
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for var in ("SANDSTONE_DECK_PATH", "SANDSTONE_STRICT_RATINGS", "SANDSTONE_SHUFFLE_SEED"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def deck_file(tmp_path):
    """Writes a small deck file: one new card, one learning card, one lapsed card."""
    path = tmp_path / "biology.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "id": "biology",
                "name": "Biology",
                "cards": [
                    {"id": "c1", "front": "Mitochondria", "back": "Powerhouse of the cell"},
                    {
                        "id": "c2",
                        "front": "Ribosome",
                        "back": "Protein synthesis",
                        "interval": 1,
                        "repetition_count": 1,
                        "ease_factor": 2.5,
                        "next_review": "2026-10-18T09:00:00+00:00",
                    },
                    {
                        "id": "c3",
                        "front": "Golgi apparatus",
                        "back": "Packaging",
                        "interval": 1,
                        "repetition_count": 0,
                        "ease_factor": 1.8,
                        "lapses": 2,
                        "next_review": "2099-01-01T00:00:00+00:00",
                    },
                ],
            },
            sort_keys=False,
        ),
        encoding="utf-8",
    )
    return path
