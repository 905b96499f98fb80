import json

from quiz_taker.core.quiz_engine import QuizEngine
from quiz_taker.core.services.snapshot_store import InMemorySnapshotStore, JsonFileSnapshotStore


def test_file_store_round_trips_engine_state(tmp_path, definition):
    store = JsonFileSnapshotStore(tmp_path / "state" / "quiz.state.v1.json")
    engine = QuizEngine(definition)
    engine.select(0)
    engine.finish()

    store.save(engine.to_state())
    loaded = store.load()

    assert loaded == json.loads(json.dumps(engine.to_state()))
    restored = QuizEngine.from_state(definition, loaded)
    assert restored.summary == engine.summary


def test_file_store_missing_file_loads_none(tmp_path):
    assert JsonFileSnapshotStore(tmp_path / "absent.json").load() is None


def test_file_store_ignores_corrupt_json(tmp_path, caplog):
    path = tmp_path / "state.json"
    path.write_text("{broken", encoding="utf-8")

    assert JsonFileSnapshotStore(path).load() is None
    assert "corrupt" in caplog.text


def test_file_store_ignores_wrong_shape(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"answers": ["not", "a", "mapping"]}), encoding="utf-8")

    assert JsonFileSnapshotStore(path).load() is None


def test_file_store_omits_missing_fields(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"remaining_sec": 12}), encoding="utf-8")

    assert JsonFileSnapshotStore(path).load() == {"remaining_sec": 12}


def test_file_store_save_overwrites_and_clear_removes(tmp_path):
    store = JsonFileSnapshotStore(tmp_path / "state.json")
    store.save({"remaining_sec": 10})
    store.save({"remaining_sec": 9})

    assert store.load() == {"remaining_sec": 9}
    assert not (tmp_path / "state.json.tmp").exists()

    store.clear()
    store.clear()

    assert not store.path.exists()
    assert store.load() is None


def test_memory_store_keeps_independent_copies():
    snapshot = {"answers": {"q1": 0}}
    store = InMemorySnapshotStore()

    store.save(snapshot)
    snapshot["answers"]["q1"] = 1
    loaded = store.load()
    loaded["answers"]["q2"] = 0

    assert store.load() == {"answers": {"q1": 0}}
    assert store.save_count == 1


def test_memory_store_clear():
    store = InMemorySnapshotStore({"remaining_sec": 3})

    store.clear()

    assert store.load() is None
