"""Tests for StateStore."""

from graphstate import StateChange, StateDefinition, StateStore, StyleRegistry


class TestLocalReasons:
    def test_add_activates_state(self, store):
        store.add_reason("n1", "hover", "mouse")
        assert store.get_active_states("n1") == ["hover"]

    def test_unknown_entity_has_no_states(self, store):
        assert store.get_active_states("nope") == []

    def test_add_is_idempotent(self, store):
        store.add_reason("n1", "hover", "mouse")
        once = store.get_active_states("n1")
        store.add_reason("n1", "hover", "mouse")
        assert store.get_active_states("n1") == once
        assert store.reasons_for("n1", "hover") == {"mouse"}

    def test_add_then_remove_round_trips(self, store):
        store.add_reason("n1", "selected", "click")
        before = store.get_active_states("n1")
        store.add_reason("n1", "hover", "mouse")
        store.remove_reason("n1", "hover", "mouse")
        assert store.get_active_states("n1") == before

    def test_state_stays_active_while_any_reason_left(self, store):
        store.add_reason("n1", "highlight", "search")
        store.add_reason("n1", "highlight", "trace_1")
        store.remove_reason("n1", "highlight", "search")
        assert store.has_state("n1", "highlight")
        store.remove_reason("n1", "highlight", "trace_1")
        assert not store.has_state("n1", "highlight")

    def test_single_remove_drops_reason_added_twice(self, store):
        store.add_reason("n1", "hover", "mouse")
        store.add_reason("n1", "hover", "mouse")
        store.remove_reason("n1", "hover", "mouse")
        assert store.get_active_states("n1") == []

    def test_remove_unknown_is_noop(self, store):
        store.remove_reason("nope", "hover", "mouse")
        store.add_reason("n1", "hover", "mouse")
        store.remove_reason("n1", "selected", "mouse")
        store.remove_reason("n1", "hover", "other")
        assert store.get_active_states("n1") == ["hover"]

    def test_empty_state_entry_is_dropped(self, store):
        store.add_reason("n1", "hover", "mouse")
        store.remove_reason("n1", "hover", "mouse")
        assert list(store.entities()) == []


class TestGlobalReasons:
    def test_global_applies_to_every_entity(self, store):
        store.add_global_reason("selected", "select_all")
        store.add_reason("n1", "hover", "mouse")
        assert set(store.get_active_states("n1")) == {"selected", "hover"}
        assert store.get_active_states("n2") == ["selected"]

    def test_global_and_local_same_state_listed_once(self, store):
        store.add_global_reason("selected", "select_all")
        store.add_reason("n1", "selected", "click")
        assert store.get_active_states("n1") == ["selected"]
        assert store.reasons_for("n1", "selected") == {"select_all", "click"}

    def test_remove_global(self, store):
        store.add_global_reason("dimmed", "focus_mode")
        store.remove_global_reason("dimmed", "focus_mode")
        assert store.get_active_states("n1") == []

    def test_remove_unknown_global_is_noop(self, store):
        store.remove_global_reason("dimmed", "focus_mode")
        store.add_global_reason("dimmed", "focus_mode")
        store.remove_global_reason("dimmed", "other")
        assert store.get_active_states("any") == ["dimmed"]


class TestDefinitions:
    def test_add_reason_with_config_registers_definition(self, store):
        store.add_reason("n1", "pulse", "r1", {"priority": 70, "style": {"lineWidth": 5}})
        definition = store.get_dynamic_definitions()["pulse"]
        assert definition == StateDefinition(70, {"lineWidth": 5})

    def test_legacy_layer_key(self, store):
        store.register_state("pulse", {"layer": 55, "style": {"fill": "#f00"}})
        assert store.get_dynamic_definitions()["pulse"].priority == 55

    def test_definition_survives_reason_removal(self, store):
        store.add_reason("n1", "pulse", "r1", {"priority": 70, "style": {}})
        store.remove_reason("n1", "pulse", "r1")
        assert "pulse" in store.get_dynamic_definitions()

    def test_register_replaces_whole_entry(self, store):
        store.register_state("pulse", {"priority": 70, "style": {"lineWidth": 5, "fill": "#f00"}})
        store.register_state("pulse", {"priority": 10, "style": {"lineWidth": 2}})
        assert store.get_dynamic_definitions()["pulse"] == StateDefinition(10, {"lineWidth": 2})

    def test_register_does_not_activate(self, store):
        store.register_state("pulse", {"priority": 70, "style": {}})
        assert store.get_active_states("n1") == []

    def test_register_ignores_empty_config(self, store):
        store.register_state("pulse", None)
        store.register_state("", {"priority": 1})
        assert store.get_dynamic_definitions() == {}

    def test_snapshot_is_detached(self, store):
        snapshot = store.get_dynamic_definitions()
        store.register_state("pulse", {"priority": 1})
        assert "pulse" not in snapshot

    def test_shared_registry(self):
        registry = StyleRegistry()
        a, b = StateStore(registry), StateStore(registry)
        a.register_state("pulse", {"priority": 3})
        assert b.get_dynamic_definitions()["pulse"].priority == 3

    def test_stores_isolated_by_default(self):
        a, b = StateStore(), StateStore()
        a.register_state("pulse", {"priority": 3})
        assert "pulse" not in b.get_dynamic_definitions()


class TestClear:
    def test_clear_node(self, store):
        store.add_reason("n1", "hover", "mouse")
        store.add_reason("n2", "hover", "mouse")
        store.clear_node("n1")
        assert store.get_active_states("n1") == []
        assert store.get_active_states("n2") == ["hover"]

    def test_clear_all_keeps_definitions(self, store):
        store.add_reason("n1", "pulse", "r1", {"priority": 70, "style": {}})
        store.add_global_reason("selected", "all")
        store.clear_all()
        assert store.get_active_states("n1") == []
        assert "pulse" in store.get_dynamic_definitions()


class TestSubscribe:
    def test_receives_effective_changes(self, store):
        log = []
        store.subscribe(log.append)
        store.add_reason("n1", "hover", "mouse")
        store.add_reason("n1", "hover", "mouse")  # no change
        store.remove_reason("n1", "hover", "mouse")
        store.remove_reason("n1", "hover", "mouse")  # no change
        assert log == [
            StateChange("added", "n1", "hover", "mouse"),
            StateChange("removed", "n1", "hover", "mouse"),
        ]

    def test_global_changes_have_no_entity(self, store):
        log = []
        store.subscribe(log.append)
        store.add_global_reason("selected", "all")
        assert log == [StateChange("added", None, "selected", "all")]

    def test_clear_notifies(self, store):
        log = []
        store.add_reason("n1", "hover", "mouse")
        store.add_global_reason("selected", "all")
        store.subscribe(log.append)
        store.clear_node("n1")
        store.clear_node("n1")  # already gone
        store.clear_all()
        assert log == [StateChange("cleared", "n1"), StateChange("cleared", None)]

    def test_clear_node_without_states_is_silent(self, store):
        log = []
        store.add_reason("n1", "hover", "mouse")
        store.remove_reason("n1", "hover", "mouse")
        store.subscribe(log.append)
        store.clear_node("n1")
        store.clear_all()
        assert log == []

    def test_unsubscribe(self, store):
        log = []
        unsub = store.subscribe(log.append)
        unsub()
        unsub()  # should not raise
        store.add_reason("n1", "hover", "mouse")
        assert log == []
