"""Reducers and action creators shared across the test suite."""

from pyredux import UNDEFINED

ADD_TODO = "ADD_TODO"
DISPATCH_IN_MIDDLE = "DISPATCH_IN_MIDDLE"
GET_STATE_IN_MIDDLE = "GET_STATE_IN_MIDDLE"
SUBSCRIBE_IN_MIDDLE = "SUBSCRIBE_IN_MIDDLE"
UNSUBSCRIBE_IN_MIDDLE = "UNSUBSCRIBE_IN_MIDDLE"
THROW_ERROR = "THROW_ERROR"
UNKNOWN_ACTION = "UNKNOWN_ACTION"


def add_todo(text):
    return {"type": ADD_TODO, "text": text}


def dispatch_in_middle(bound_dispatch):
    return {"type": DISPATCH_IN_MIDDLE, "callback": bound_dispatch}


def get_state_in_middle(bound_get_state):
    return {"type": GET_STATE_IN_MIDDLE, "callback": bound_get_state}


def subscribe_in_middle(bound_subscribe):
    return {"type": SUBSCRIBE_IN_MIDDLE, "callback": bound_subscribe}


def unsubscribe_in_middle(bound_unsubscribe):
    return {"type": UNSUBSCRIBE_IN_MIDDLE, "callback": bound_unsubscribe}


def throw_error():
    return {"type": THROW_ERROR}


def unknown_action():
    return {"type": UNKNOWN_ACTION}


def _next_id(state):
    return max((todo["id"] for todo in state), default=0) + 1


def todos(state=UNDEFINED, action=None):
    if state is UNDEFINED:
        state = []
    action_type = action["type"]

    if action_type == ADD_TODO:
        return [*state, {"id": _next_id(state), "text": action["text"]}]
    if action_type in (DISPATCH_IN_MIDDLE, GET_STATE_IN_MIDDLE, SUBSCRIBE_IN_MIDDLE, UNSUBSCRIBE_IN_MIDDLE):
        action["callback"]()
        return state
    if action_type == THROW_ERROR:
        raise RuntimeError("reducer failure")
    return state


def todos_reverse(state=UNDEFINED, action=None):
    if state is UNDEFINED:
        state = []

    if action["type"] == ADD_TODO:
        return [{"id": _next_id(state), "text": action["text"]}, *state]
    return todos(state, action)


def counter(state=UNDEFINED, action=None):
    if state is UNDEFINED:
        state = 0
    if action["type"] == "increment":
        return state + 1
    if action["type"] == "decrement":
        return state - 1
    return state


def stack(state=UNDEFINED, action=None):
    if state is UNDEFINED:
        state = []
    if action["type"] == "push":
        return [*state, action["value"]]
    return state
