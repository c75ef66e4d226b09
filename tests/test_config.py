from pathlib import Path

import pytest

from recall import config
from recall.config import RecallSettings
from recall.scheduling import MemoryModelScheduler, SchedulingAlgorithm, StepScheduler, build_engine
from recall.storage.persistence import JsonFilePersistence, SqlDocumentPersistence


def test_settings_defaults():
    settings = RecallSettings.from_section(None)

    assert settings.scheduling_algorithm == SchedulingAlgorithm.ANKI
    assert settings.step_parameters == {}
    assert settings.memory_model_parameters == {}


def test_settings_keep_unknown_keys():
    section = {"schedulingAlgorithm": "fsrs", "memoryModelParameters": {"request_retention": 0.85}, "theme": "dark"}

    settings = RecallSettings.from_section(section)
    dumped = settings.to_section()

    assert settings.scheduling_algorithm == SchedulingAlgorithm.FSRS
    assert dumped["schedulingAlgorithm"] == "fsrs"
    assert dumped["theme"] == "dark"
    assert dumped["memoryModelParameters"] == {"request_retention": 0.85}


def test_build_step_engine_with_overrides(clock):
    settings = RecallSettings.from_section({"stepParameters": {"easy_bonus": 1.5}})

    engine = build_engine(settings, clock=clock)

    assert isinstance(engine, StepScheduler)
    assert engine.get_parameters().easy_bonus == 1.5
    assert engine.clock is clock


def test_build_memory_engine_with_overrides():
    settings = RecallSettings.from_section({
        "schedulingAlgorithm": "fsrs",
        "memoryModelParameters": {"request_retention": 0.85, "maximum_interval": 365},
    })

    engine = settings.build_engine()

    assert isinstance(engine, MemoryModelScheduler)
    assert engine.get_parameters().request_retention == 0.85
    assert engine.get_parameters().maximum_interval == 365


def test_build_engine_rejects_unknown_parameters():
    settings = RecallSettings.from_section({"stepParameters": {"bogus": 1}})

    with pytest.raises(TypeError):
        settings.build_engine()


def test_data_file(monkeypatch, tmp_path):
    monkeypatch.setenv("RECALL_DATA_FILE", str(tmp_path / "recall.json"))
    assert config.get_data_file() == tmp_path / "recall.json"

    monkeypatch.setenv("TEST_MODE", "true")
    assert config.get_data_file() == tmp_path / "test_recall.json"


def test_default_data_file():
    assert config.get_data_file() == Path("data/recall.json")


def test_database_url_test_mode(monkeypatch):
    assert config.get_database_url() is None

    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/recall_db")
    assert config.get_database_url() == "postgresql://u:p@localhost:5432/recall_db"

    monkeypatch.setenv("TEST_MODE", "true")
    assert config.get_database_url() == "postgresql://u:p@localhost:5432/test_recall_db"


def test_build_persistence_json(monkeypatch, tmp_path):
    monkeypatch.setenv("RECALL_DATA_FILE", str(tmp_path / "recall.json"))

    persistence = config.build_persistence()

    assert isinstance(persistence, JsonFilePersistence)
    assert persistence.path == tmp_path / "recall.json"


def test_build_persistence_sql(monkeypatch, sqlite_url):
    monkeypatch.setenv("DATABASE_URL", sqlite_url)
    monkeypatch.setenv("RECALL_DOCUMENT_KEY", "mine")

    persistence = config.build_persistence()

    assert isinstance(persistence, SqlDocumentPersistence)
    assert persistence.key == "mine"
