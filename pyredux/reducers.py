"""
PyRedux 的 Reducer 模組。

提供以處理器表建立 reducer 的 create_reducer / on，
以及把多個 slice reducer 合併為單一 reducer 的 combine_reducers。
"""
from typing import Any, Dict, Mapping, Optional

from .actions import ActionTypes, default_action_types
from .config import StoreConfig, get_default_config
from .errors import ShapeError, StateError
from .types import Action, Reducer, S
from .utils import UNDEFINED, is_plain_object, warning


def create_reducer(initial_state: S, *handlers) -> Reducer:
    """
    創建一個 reducer 函式，用於處理狀態變更。

    Args:
        initial_state: 初始狀態，當傳入的 state 為 UNDEFINED 時使用。
        *handlers: 一系列 (action_type, handler_fn) 元組或使用 on 函式創建的處理器。

    Returns:
        一個 reducer 函式，根據 action 的類型執行對應的處理邏輯。
    """
    action_handlers = {}  # 儲存 action 類型與處理函式的對應關係

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            action_type, handler_fn = handler
            action_handlers[action_type] = handler_fn
        else:
            action_handlers.update(handler)

    def reducer(state: S = UNDEFINED, action: Optional[Action] = None) -> S:
        if state is UNDEFINED:
            state = initial_state
        if action is None:
            return state

        handler = action_handlers.get(action.get("type"))
        if handler:
            return handler(state, action)
        return state  # 沒有對應處理函式，返回原狀態

    reducer.initial_state = initial_state
    reducer.handlers = action_handlers

    return reducer


def on(action_creator_or_type, handler):
    """
    創建一個 action 類型與處理函式的映射。

    Args:
        action_creator_or_type: Action 創建器函式或 Action 類型。
        handler: 處理該 Action 的函式，接收 (state, action) 並返回新狀態。

    Returns:
        一個包含 {action_type: handler} 的字典。
    """
    if callable(action_creator_or_type) and hasattr(action_creator_or_type, "type"):
        action_type = action_creator_or_type.type
    else:
        action_type = action_creator_or_type

    return {action_type: handler}


def _undefined_state_message(key: str, action: Any) -> str:
    action_type = action.get("type") if is_plain_object(action) else None
    action_description = f'action "{action_type}"' if action_type else "an action"
    return (
        f'Given {action_description}, reducer "{key}" returned UNDEFINED. '
        "To ignore an action, you must explicitly return the previous state. "
        "If you want this reducer to hold no value, you can return None instead of UNDEFINED."
    )


def _unexpected_state_shape_message(
    input_state: Any,
    reducers: Mapping[str, Reducer],
    action: Any,
    unexpected_key_cache: Dict[str, bool],
    action_types: ActionTypes,
) -> Optional[str]:
    """
    檢查傳入的 state 形狀，返回警告訊息；形狀合法時返回 None。

    非預期的 key 會先寫入快取，因此同一個 key 只會警告一次；
    REPLACE 之後 state 形狀本來就會改變，不發出警告。
    """
    reducer_keys = list(reducers)
    action_type = action.get("type") if is_plain_object(action) else None
    argument_name = (
        "preloaded_state argument passed to create_store"
        if action_type == action_types.init
        else "previous state received by the reducer"
    )

    if not reducer_keys:
        return (
            "Store does not have a valid reducer. Make sure the argument passed "
            "to combine_reducers is a dict whose values are reducers."
        )

    if not is_plain_object(input_state):
        return (
            f'The {argument_name} has unexpected type of "{type(input_state).__name__}". '
            f'Expected argument to be a dict with the following keys: "{", ".join(map(str, reducer_keys))}"'
        )

    unexpected_keys = [
        key for key in input_state
        if key not in reducers and not unexpected_key_cache.get(key)
    ]
    for key in unexpected_keys:
        unexpected_key_cache[key] = True

    if action_type == action_types.replace:
        return None

    if unexpected_keys:
        return (
            f"Unexpected {'keys' if len(unexpected_keys) > 1 else 'key'} "
            f'"{", ".join(map(str, unexpected_keys))}" found in {argument_name}. '
            f'Expected to find one of the known reducer keys instead: '
            f'"{", ".join(map(str, reducer_keys))}". Unexpected keys will be ignored.'
        )
    return None


def _assert_reducer_shape(reducers: Mapping[str, Reducer], action_types: ActionTypes) -> None:
    for key, reducer in reducers.items():
        initial_state = reducer(UNDEFINED, {"type": action_types.init})
        if initial_state is UNDEFINED:
            raise ShapeError(
                f'Reducer "{key}" returned UNDEFINED during initialization. '
                "If the state passed to the reducer is UNDEFINED, you must "
                "explicitly return the initial state. The initial state may "
                "not be UNDEFINED. If you don't want to set a value for this reducer, "
                "you can use None instead of UNDEFINED.",
                reducer_name=key,
                action_type=action_types.init,
            )

        probe_type = action_types.probe_unknown_action()
        if reducer(UNDEFINED, {"type": probe_type}) is UNDEFINED:
            raise ShapeError(
                f'Reducer "{key}" returned UNDEFINED when probed with a random type. '
                f'Don\'t try to handle {action_types.init} or other actions in "{action_types.namespace}/*" '
                "namespace. They are considered private. Instead, you must return the "
                "current state for any unknown actions, unless it is UNDEFINED, "
                "in which case you must return the initial state, regardless of the "
                "action type. The initial state may not be UNDEFINED, but can be None.",
                reducer_name=key,
                action_type=probe_type,
            )


def _read_slice(state: Any, key: str) -> Any:
    if isinstance(state, Mapping) or is_plain_object(state):
        return state.get(key, UNDEFINED)
    return UNDEFINED


def combine_reducers(
    reducers: Mapping[str, Reducer],
    *,
    config: Optional[StoreConfig] = None,
    action_types: Optional[ActionTypes] = None,
) -> Reducer:
    """
    把值為 reducer 的字典合併為單一 reducer。

    合併後的 reducer 會呼叫每個子 reducer，並以相同的 key 收集結果。
    子 reducer 永遠不能返回 UNDEFINED：state 為 UNDEFINED 時必須返回初始狀態，
    遇到不認識的 action 時必須返回當前狀態。

    Args:
        reducers: slice key 到 reducer 的映射，只保留其中可調用的值
        config: 執行設定，預設從環境變數讀取
        action_types: 控制 Action 類型，預設使用模組級的 default_action_types

    Returns:
        合併後的 reducer。若子 reducer 形狀不合法，錯誤會延遲到第一次呼叫時拋出。
    """
    config = config or get_default_config()
    action_types = action_types or default_action_types

    final_reducers: Dict[str, Reducer] = {}
    for key, reducer in reducers.items():
        if config.diagnostics and (reducer is UNDEFINED or reducer is None):
            warning(f'No reducer provided for key "{key}"')

        if callable(reducer):
            final_reducers[key] = reducer

    unexpected_key_cache: Dict[str, bool] = {}

    # 探測時的任何錯誤都延遲到第一次呼叫時拋出
    shape_assertion_error: Optional[Exception] = None
    try:
        _assert_reducer_shape(final_reducers, action_types)
    except Exception as err:
        shape_assertion_error = err

    def combination(state: Any = UNDEFINED, action: Optional[Action] = None) -> Any:
        if state is UNDEFINED:
            state = {}

        if shape_assertion_error is not None:
            raise shape_assertion_error

        if config.diagnostics and config.warn_unexpected_keys:
            message = _unexpected_state_shape_message(
                state, final_reducers, action, unexpected_key_cache, action_types
            )
            if message:
                warning(message)

        has_changed = False
        next_state = {}
        for key, reducer in final_reducers.items():
            previous_state_for_key = _read_slice(state, key)
            next_state_for_key = reducer(previous_state_for_key, action)
            if next_state_for_key is UNDEFINED:
                raise StateError(
                    _undefined_state_message(key, action),
                    reducer_name=key,
                    action_type=action.get("type") if is_plain_object(action) else None,
                    state=previous_state_for_key,
                )
            next_state[key] = next_state_for_key
            has_changed = has_changed or next_state_for_key is not previous_state_for_key
        # 多出來的 key（例如 replace_reducer 移除的 slice）也算是變更
        has_changed = has_changed or not is_plain_object(state) or len(final_reducers) != len(state)
        return next_state if has_changed else state

    combination.reducers = dict(final_reducers)
    return combination
