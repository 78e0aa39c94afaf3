"""Tests for skyline.persistence - stores, save list, and snapshot decoding."""

import json
from datetime import timedelta
from pathlib import Path

from numpy.random import Generator

from skyline.persistence.saves import (
    SaveEntry,
    SaveManager,
    decode_state,
    encode_state,
    format_timestamp,
    parse_timestamp,
)
from skyline.persistence.store import FileStore, MemoryStore
from skyline.simulation.config import SAVE_LIST_KEY, SimulationConfig
from skyline.simulation.engine import LOADED_TEXT, SimulationEngine
from skyline.simulation.messages import Sender, Severity
from skyline.simulation.state import GameState, PurchasePrompt
from skyline.world.zones import ZoneType


class TestStores:
    """Tests for the key-value stores."""

    def test_memory_store(self) -> None:
        store = MemoryStore()
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_file_store_round_trip(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path / "saves")
        assert store.get(SAVE_LIST_KEY) is None
        store.set(SAVE_LIST_KEY, "[]")
        assert store.get(SAVE_LIST_KEY) == "[]"
        assert store.path_for(SAVE_LIST_KEY).exists()

    def test_file_store_sanitises_keys(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        path = store.path_for("../evil key")
        assert path.parent == tmp_path
        store.set("../evil key", "x")
        assert store.get("../evil key") == "x"

    def test_file_store_leaves_no_temp_file(self, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        store.set("k", "v")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["k.json"]


class TestTimestamps:
    def test_millisecond_utc(self) -> None:
        moment = parse_timestamp("2024-06-10T06:13:20.123Z")
        assert moment is not None
        assert format_timestamp(moment) == "2024-06-10T06:13:20.123Z"

    def test_garbage(self) -> None:
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(42) is None


class TestSaveList:
    """Tests for listing and writing saved cities."""

    def _manager(self, rng: Generator) -> SaveManager:
        return SaveManager(MemoryStore(), SAVE_LIST_KEY, rng)

    def test_empty_store_lists_nothing(self, rng: Generator) -> None:
        assert self._manager(rng).list_entries() == []

    def test_corrupt_list_reads_as_empty(self, rng: Generator) -> None:
        manager = self._manager(rng)
        manager.store.set(SAVE_LIST_KEY, "{not json")
        assert manager.list_entries() == []

    def test_non_list_reads_as_empty(self, rng: Generator) -> None:
        manager = self._manager(rng)
        manager.store.set(SAVE_LIST_KEY, json.dumps({"id": "x"}))
        assert manager.list_entries() == []

    def test_undecodable_file_reads_as_empty(self, rng: Generator, tmp_path: Path) -> None:
        store = FileStore(tmp_path)
        store.path_for(SAVE_LIST_KEY).write_bytes(b"\xff\xfe[garbage")
        manager = SaveManager(store, SAVE_LIST_KEY, rng)
        assert store.get(SAVE_LIST_KEY) is None
        assert manager.list_entries() == []

    def test_save_replaces_undecodable_file(
        self,
        rng: Generator,
        tmp_path: Path,
        blank_state: GameState,
    ) -> None:
        store = FileStore(tmp_path)
        store.path_for(SAVE_LIST_KEY).write_bytes(b"\xff\xfe[garbage")
        manager = SaveManager(store, SAVE_LIST_KEY, rng)
        assert manager.save(blank_state, "Fresh") is not None
        assert [e.name for e in manager.list_entries()] == ["Fresh"]

    def test_entries_without_payload_are_hidden(self, rng: Generator) -> None:
        manager = self._manager(rng)
        manager.store.set(
            SAVE_LIST_KEY,
            json.dumps([{"id": "a", "name": "A"}, "junk", {"id": "b", "data": {}}]),
        )
        entries = manager.list_entries()
        assert [e.id for e in entries] == ["b"]
        assert entries[0].name == "Untitled"

    def test_blank_name_is_skipped(self, rng: Generator, blank_state: GameState) -> None:
        manager = self._manager(rng)
        assert manager.save(blank_state, "   ") is None
        assert manager.store.get(SAVE_LIST_KEY) is None

    def test_newest_first(self, rng: Generator, blank_state: GameState) -> None:
        manager = self._manager(rng)
        first = manager.save(blank_state, "First")
        second = manager.save(blank_state, " Second ")
        assert first is not None and second is not None
        assert second.name == "Second"
        assert [e.name for e in manager.list_entries()] == ["Second", "First"]
        assert first.id != second.id

    def test_id_format(self, rng: Generator) -> None:
        millis, suffix = self._manager(rng).new_id().split("-")
        assert millis.isdigit()
        assert len(suffix) == 6
        assert suffix.isalnum() and suffix == suffix.lower()

    def test_entry_dict_round_trip(self) -> None:
        entry = SaveEntry(id="1-abc", name="X", saved_at="2024-01-01T00:00:00.000Z", data={})
        assert SaveEntry.from_dict(entry.to_dict()) == entry
        assert entry.to_dict()["savedAt"] == entry.saved_at


class TestSnapshot:
    """Tests for encoding and decoding a city."""

    def test_round_trip(self, blank_state: GameState, default_config: SimulationConfig) -> None:
        state = blank_state
        state.grid.get("12-12").zone = ZoneType.HOSPITAL
        state.grid.get("12-12").level = 2
        state.grid.get("3-3").zone = ZoneType.ROCK
        state.territory.unlock("0-1")
        state.stats.money = 4321
        state.stats.day = 17
        state.camera.pan(10, -5)
        state.camera.zoom_by(0.5)
        state.ui.show_left_panel = False
        state.ui.selected_tool = ZoneType.PARK
        state.post("Watch the reservoir.", Severity.WARNING, Sender.ADVISOR)

        payload = json.loads(json.dumps(encode_state(state)))
        loaded = decode_state(payload, default_config)

        assert [(t.id, t.zone, t.level) for t in loaded.grid] == [
            (t.id, t.zone, t.level) for t in state.grid
        ]
        assert loaded.stats == state.stats
        assert loaded.territory.unlocked == state.territory.unlocked
        assert loaded.camera == state.camera
        assert loaded.ui == state.ui
        assert len(loaded.messages) == len(state.messages)
        for got, want in zip(loaded.messages, state.messages):
            assert (got.id, got.text, got.sender, got.severity) == (
                want.id,
                want.text,
                want.sender,
                want.severity,
            )
            assert abs(got.timestamp - want.timestamp) < timedelta(milliseconds=1)

    def test_payload_keys(self, blank_state: GameState) -> None:
        payload = encode_state(blank_state)
        assert payload["version"] == 1
        assert payload["unlockedChunks"] == ["1-1"]
        assert payload["ui"]["selectedTool"] == "ROAD"
        assert payload["tiles"][0] == {
            "id": "0-0",
            "x": 0,
            "y": 0,
            "type": "EMPTY",
            "level": 0,
            "density": 0.0,
            "isPowered": False,
            "hasWater": False,
        }
        assert payload["messages"][0]["timestamp"].endswith("Z")

    def test_missing_optional_fields(self, default_config: SimulationConfig) -> None:
        state = decode_state({"version": 1, "tiles": []}, default_config)
        assert len(state.grid) == 900
        assert state.territory.unlocked == {"1-1"}
        assert state.stats.money == 150000
        assert state.stats.day == 1
        assert state.messages == []
        assert (state.camera.zoom, state.camera.x, state.camera.y) == (1.0, 0.0, 0.0)
        assert state.ui.show_left_panel and state.ui.show_right_panel
        assert state.ui.selected_tool is ZoneType.ROAD
        assert state.ui.is_paused is False

    def test_non_finite_numbers_use_defaults(self, default_config: SimulationConfig) -> None:
        raw = (
            '{"version": 1,'
            ' "stats": {"money": NaN, "day": 1e999, "population": -Infinity},'
            ' "camera": {"x": Infinity, "y": NaN, "zoom": 1e999},'
            ' "tiles": [{"x": 0, "y": 0, "type": "ROAD", "level": NaN, "density": Infinity}]}'
        )
        state = decode_state(json.loads(raw), default_config)
        assert state.stats.money == 150000
        assert state.stats.day == 1
        assert state.stats.population == 0
        assert (state.camera.x, state.camera.y, state.camera.zoom) == (0.0, 0.0, 1.0)
        tile = state.grid.get("0-0")
        assert (tile.zone, tile.level, tile.density) == (ZoneType.ROAD, 0, 0.0)

    def test_huge_integers_do_not_overflow(self, default_config: SimulationConfig) -> None:
        payload = {"version": 1, "camera": {"x": 10**400, "zoom": 10**400}}
        state = decode_state(payload, default_config)
        assert (state.camera.x, state.camera.zoom) == (0.0, 1.0)

    def test_camera_clamped_on_load(self, default_config: SimulationConfig) -> None:
        payload = {"version": 1, "camera": {"x": 1e300, "y": -9999, "zoom": 50}}
        camera = decode_state(payload, default_config).camera
        assert (camera.x, camera.y, camera.zoom) == (2000.0, -2000.0, 4.0)

    def test_malformed_tiles_still_give_full_grid(
        self,
        default_config: SimulationConfig,
    ) -> None:
        tiles = [
            {"id": "2-3", "x": 2, "y": 3, "type": "PARK"},
            {"id": "4-4", "type": "ROAD"},
            {"x": 99, "y": 0, "type": "ROAD"},
            {"x": 1, "y": 1, "type": "CASTLE"},
            {"x": 5, "y": 5, "type": "MOVE"},
            "garbage",
        ]
        state = decode_state({"version": 1, "tiles": tiles}, default_config)
        assert len(state.grid) == 900
        assert state.grid.get("2-3").zone is ZoneType.PARK
        assert state.grid.get("4-4").zone is ZoneType.ROAD
        assert state.grid.get("1-1").zone is ZoneType.EMPTY
        assert state.grid.get("5-5").zone is ZoneType.EMPTY

    def test_starting_chunk_always_owned(self, default_config: SimulationConfig) -> None:
        state = decode_state({"version": 1, "unlockedChunks": ["0-0"]}, default_config)
        assert state.territory.unlocked == {"0-0", "1-1"}

    def test_transient_state_not_restored(
        self,
        blank_state: GameState,
        default_config: SimulationConfig,
    ) -> None:
        blank_state.selected_move_tile = "12-12"
        blank_state.purchase_prompt = PurchasePrompt(chunk_id="0-1", cost=40000)
        loaded = decode_state(encode_state(blank_state), default_config)
        assert loaded.selected_move_tile is None
        assert loaded.purchase_prompt is None


class TestEngineSaves:
    """Tests for save and load through the engine."""

    def test_save_posts_message(self, engine: SimulationEngine) -> None:
        entry = engine.save("My Town")
        assert entry is not None
        assert engine.state.messages[0].text == "City saved as “My Town”."
        assert engine.state.messages[0].severity is Severity.SUCCESS
        assert engine.list_saves()[0].id == entry.id

    def test_blank_save_posts_nothing(self, engine: SimulationEngine) -> None:
        count = len(engine.state.messages)
        assert engine.save("") is None
        assert len(engine.state.messages) == count
        assert engine.list_saves() == []

    def test_load_restores_city(self, engine: SimulationEngine) -> None:
        engine.place("12-12", ZoneType.RESIDENTIAL_LOW)
        engine.run(ticks=4)
        entry = engine.save("Checkpoint")
        assert entry is not None
        snapshot = engine.state

        engine.restart()
        assert engine.load(entry) is True
        state = engine.state
        assert state is not snapshot
        assert state.stats == snapshot.stats
        assert state.grid.get("12-12").zone is ZoneType.RESIDENTIAL_LOW
        assert state.messages[0].text == LOADED_TEXT
        saved_texts = [m["text"] for m in entry.data["messages"]]
        assert [m.text for m in state.messages[1:]] == saved_texts

    def test_load_clears_transient_state(self, engine: SimulationEngine) -> None:
        engine.place("5-12", ZoneType.ROAD)
        assert engine.state.purchase_prompt is not None
        engine.save("Prompt open")
        engine.load_latest()
        assert engine.state.purchase_prompt is None
        assert engine.state.selected_move_tile is None

    def test_saves_survive_engine_restart(self, tmp_path: Path) -> None:
        config = SimulationConfig(seed=1)
        first = SimulationEngine(config=config, store=FileStore(tmp_path))
        first.save("Persistent")
        second = SimulationEngine(config=config, store=FileStore(tmp_path))
        assert [e.name for e in second.list_saves()] == ["Persistent"]
        assert second.load_latest() is True
        assert second.state.stats.name == first.state.stats.name
