import logging

import pytest
from immutables import Map

from pyredux import (
    UNDEFINED,
    ActionTypes,
    ShapeError,
    StateError,
    StoreConfig,
    combine_reducers,
    create_store,
)

from .helpers import add_todo, counter, stack, todos, unknown_action


DEVELOPMENT = StoreConfig(production=False)
PRODUCTION = StoreConfig(production=True)


@pytest.fixture
def warnings_log(caplog):
    caplog.set_level(logging.WARNING, logger="pyredux")
    return caplog


def _messages(caplog):
    return [record.getMessage() for record in caplog.records if record.name == "pyredux"]


class TestCombineReducers:
    def test_returns_a_reducer_that_maps_the_state_keys(self):
        reducer = combine_reducers({"counter": counter, "stack": stack})

        s1 = reducer({}, {"type": "increment"})
        assert s1 == {"counter": 1, "stack": []}
        s2 = reducer(s1, {"type": "push", "value": "a"})
        assert s2 == {"counter": 1, "stack": ["a"]}

    def test_starts_from_an_empty_state(self):
        reducer = combine_reducers({"counter": counter})
        assert reducer(UNDEFINED, unknown_action()) == {"counter": 0}

    def test_ignores_values_that_are_not_callable(self):
        reducer = combine_reducers(
            {"fake": True, "broken": "string", "another": {"nested": "object"}, "stack": stack},
            config=PRODUCTION,
        )

        assert list(reducer(UNDEFINED, unknown_action())) == ["stack"]

    def test_warns_when_a_reducer_is_missing(self, warnings_log):
        combine_reducers({"whatever": None, "other": UNDEFINED, "counter": counter}, config=DEVELOPMENT)

        messages = _messages(warnings_log)
        assert 'No reducer provided for key "whatever"' in messages
        assert 'No reducer provided for key "other"' in messages

    def test_missing_reducer_is_silent_in_production(self, warnings_log):
        combine_reducers({"whatever": None, "counter": counter}, config=PRODUCTION)
        assert _messages(warnings_log) == []

    def test_raises_when_a_reducer_returns_undefined_for_an_action(self):
        def undefined_by_default(state=UNDEFINED, action=None):
            if action["type"] == "increment":
                return UNDEFINED
            return 0 if state is UNDEFINED else state

        reducer = combine_reducers({"counter": counter, "undefined_by_default": undefined_by_default})
        initial = reducer(UNDEFINED, unknown_action())

        with pytest.raises(StateError) as exc_info:
            reducer(initial, {"type": "increment"})

        assert exc_info.value.reducer_name == "undefined_by_default"
        assert 'reducer "undefined_by_default" returned UNDEFINED' in str(exc_info.value)
        assert 'action "increment"' in str(exc_info.value)

    def test_none_is_a_valid_slice_value(self):
        def nothing(state=UNDEFINED, action=None):
            return None

        reducer = combine_reducers({"nothing": nothing})
        assert reducer(UNDEFINED, unknown_action()) == {"nothing": None}

    def test_defers_the_initialization_error_until_first_call(self):
        def broken(state=UNDEFINED, action=None):
            return state

        reducer = combine_reducers({"counter": counter, "broken": broken})

        with pytest.raises(ShapeError, match="returned UNDEFINED during initialization") as exc_info:
            reducer(UNDEFINED, unknown_action())
        assert exc_info.value.reducer_name == "broken"

        with pytest.raises(ShapeError):
            reducer({"counter": 0, "broken": 1}, unknown_action())

    def test_defers_any_error_raised_while_probing(self):
        def strict(state=UNDEFINED, action=None):
            return state + action["payload"]

        reducer = combine_reducers({"strict": strict})

        with pytest.raises(KeyError):
            reducer(UNDEFINED, unknown_action())

    def test_catches_reducers_that_handle_private_action_types(self):
        action_types = ActionTypes.generate()

        def handles_init_only(state=UNDEFINED, action=None):
            if action["type"] == action_types.init:
                return 0
            return state

        reducer = combine_reducers({"counter": handles_init_only}, action_types=action_types)

        with pytest.raises(ShapeError, match="probed with a random type"):
            reducer(UNDEFINED, unknown_action())

    def test_probes_with_a_fresh_type_every_time(self):
        action_types = ActionTypes.generate()
        seen = []

        def spy(state=UNDEFINED, action=None):
            seen.append(action["type"])
            return 0 if state is UNDEFINED else state

        combine_reducers({"a": spy}, action_types=action_types)
        combine_reducers({"a": spy}, action_types=action_types)

        assert seen[0] == seen[2] == action_types.init
        assert seen[1] != seen[3]
        assert seen[1].startswith(f"{action_types.namespace}/PROBE_UNKNOWN_ACTION")

    def test_keeps_the_same_reference_when_nothing_changed(self):
        def r_a(state=UNDEFINED, action=None):
            return 0 if state is UNDEFINED else state

        def r_b(state=UNDEFINED, action=None):
            return 0 if state is UNDEFINED else state

        reducer = combine_reducers({"a": r_a, "b": r_b})
        state = {"a": 1, "b": 2}

        assert reducer(state, unknown_action()) is state

    def test_keeps_the_same_reference_for_map_state(self):
        reducer = combine_reducers({"counter": counter, "stack": stack})
        state = Map(counter=1, stack=[])

        assert reducer(state, unknown_action()) is state

    def test_builds_a_new_state_when_one_slice_changed(self):
        reducer = combine_reducers({"counter": counter, "stack": stack})
        state = reducer(UNDEFINED, unknown_action())

        next_state = reducer(state, {"type": "increment"})

        assert next_state is not state
        assert next_state["stack"] is state["stack"]

    def test_runs_slice_reducers_in_key_order_with_their_own_slice(self):
        calls = []

        def make(name):
            def reducer(state=UNDEFINED, action=None):
                calls.append((name, state, action["type"]))
                return name if state is UNDEFINED else state
            return reducer

        reducer = combine_reducers({"z": make("z"), "a": make("a"), "m": make("m")})
        calls.clear()

        reducer({"z": 1, "a": 2, "m": 3}, unknown_action())

        assert calls == [
            ("z", 1, "UNKNOWN_ACTION"),
            ("a", 2, "UNKNOWN_ACTION"),
            ("m", 3, "UNKNOWN_ACTION"),
        ]


class TestShapeWarnings:
    def test_warns_about_unexpected_keys_in_the_preloaded_state(self, warnings_log):
        reducer = combine_reducers({"todos": todos}, config=DEVELOPMENT)

        create_store(reducer, {"todos": [], "bar": 2}, config=DEVELOPMENT)

        assert (
            'Unexpected key "bar" found in preloaded_state argument passed to create_store. '
            'Expected to find one of the known reducer keys instead: "todos". '
            "Unexpected keys will be ignored."
        ) in _messages(warnings_log)

    def test_warns_about_several_unexpected_keys(self, warnings_log):
        reducer = combine_reducers({"todos": todos}, config=DEVELOPMENT)

        reducer({"todos": [], "foo": 1, "bar": 2}, unknown_action())

        assert any(
            message.startswith('Unexpected keys "foo, bar" found in previous state received by the reducer')
            for message in _messages(warnings_log)
        )

    def test_warns_once_per_unexpected_key(self, warnings_log):
        reducer = combine_reducers({"todos": todos}, config=DEVELOPMENT)
        store = create_store(reducer, {"todos": [], "bar": 2}, config=DEVELOPMENT)
        warnings_log.clear()

        store.dispatch(add_todo("Hello"))
        reducer({"todos": [], "bar": 3}, unknown_action())

        assert _messages(warnings_log) == []

    def test_warns_about_a_state_that_is_not_a_record(self, warnings_log):
        reducer = combine_reducers({"counter": counter}, config=DEVELOPMENT)

        assert reducer(42, unknown_action()) == {"counter": 0}

        assert (
            'The previous state received by the reducer has unexpected type of "int". '
            'Expected argument to be a dict with the following keys: "counter"'
        ) in _messages(warnings_log)

    def test_warns_when_there_are_no_reducers(self, warnings_log):
        reducer = combine_reducers({}, config=DEVELOPMENT)
        state = {}

        assert reducer(state, unknown_action()) is state
        assert any("Store does not have a valid reducer" in message for message in _messages(warnings_log))

    def test_does_not_warn_after_replacing_the_reducer(self, warnings_log):
        store = create_store(
            combine_reducers({"foo": counter, "bar": stack}, config=DEVELOPMENT),
            config=DEVELOPMENT,
        )
        warnings_log.clear()

        store.replace_reducer(combine_reducers({"foo": counter}, config=DEVELOPMENT))
        store.dispatch(unknown_action())

        assert _messages(warnings_log) == []
        assert store.get_state() == {"foo": 0}

    def test_shape_warnings_are_silent_in_production(self, warnings_log):
        reducer = combine_reducers({"todos": todos}, config=PRODUCTION)
        reducer({"todos": [], "bar": 2}, unknown_action())
        reducer(42, unknown_action())

        assert _messages(warnings_log) == []

    def test_unexpected_key_warnings_can_be_disabled(self, warnings_log):
        config = StoreConfig(warn_unexpected_keys=False)
        reducer = combine_reducers({"todos": todos}, config=config)

        reducer({"todos": [], "bar": 2}, unknown_action())

        assert _messages(warnings_log) == []
