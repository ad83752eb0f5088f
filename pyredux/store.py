import functools
import logging
from typing import Any, Callable, Generic, List, Optional

from reactivex import Observable, create as rx_create, operators as ops
from reactivex.disposable import Disposable

from .actions import ActionTypes, default_action_types
from .config import StoreConfig, get_default_config
from .errors import ActionError, ConfigurationError, InvariantViolation
from .types import Action, Listener, Reducer, S, StoreEnhancer
from .utils import UNDEFINED, is_plain_object


logger = logging.getLogger(__name__)


class ListenerHandle:
    """
    subscribe 返回的訂閱憑證。

    每次註冊都有自己的憑證，同一個 listener 重複註冊時可以個別取消。
    憑證本身可調用，調用即取消訂閱；重複取消不會有任何效果。
    """
    __slots__ = ("listener", "_store", "_active")

    def __init__(self, store: "Store", listener: Listener):
        self.listener = listener
        self._store = store
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._store._remove_listener(self)
        self._active = False

    def __call__(self) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        return f"ListenerHandle(listener={self.listener!r}, active={self._active})"


class StoreSubscription(Disposable):
    """StateObservable.subscribe 返回的可取消訂閱。"""

    def unsubscribe(self) -> None:
        self.dispose()


class StateObservable:
    """
    Store 的響應式介面。

    訂閱後立即收到當前狀態，之後每次 dispatch 完成都會再收到一次。
    可以透過 pipe 接上 reactivex 的運算子。
    """

    def __init__(self, store: "Store"):
        self._store = store

    def subscribe(self, observer: Any) -> StoreSubscription:
        """
        訂閱狀態變化。

        Args:
            observer: 具有 on_next 屬性的物件，或含有 "on_next" 鍵的字典；
                沒有 on_next 時仍會註冊，但不會收到任何值

        Returns:
            StoreSubscription，調用 unsubscribe() 或 dispose() 即取消訂閱

        Raises:
            TypeError: observer 為 None、純函數或純量
        """
        if observer is None or callable(observer) or isinstance(observer, (str, bytes, int, float, bool)):
            raise TypeError("Expected the observer to be an object.")

        if is_plain_object(observer):
            on_next = observer.get("on_next")
        else:
            on_next = getattr(observer, "on_next", None)
        return self._attach(on_next)

    def _attach(self, on_next: Optional[Callable[[Any], None]]) -> StoreSubscription:
        def observe_state() -> None:
            if on_next is not None:
                on_next(self._store.get_state())

        observe_state()
        handle = self._store.subscribe(observe_state)
        return StoreSubscription(handle.unsubscribe)

    def _subscribe_rx(self, observer, scheduler=None) -> StoreSubscription:
        return self._attach(observer.on_next)

    def as_observable(self) -> Observable:
        """轉換為 reactivex Observable。"""
        return rx_create(self._subscribe_rx)

    def pipe(self, *operators) -> Observable:
        return self.as_observable().pipe(*operators)


class Store(Generic[S]):
    """
    狀態容器，持有唯一的狀態樹，只能透過 dispatch 一個 action 來改變。

    Store 在建立時會立即 dispatch 一個私有的 INIT action，讓每個 reducer
    填入初始狀態。reducer 執行期間禁止呼叫 get_state、subscribe、
    取消訂閱以及再次 dispatch。
    """

    def __init__(
        self,
        reducer: Reducer,
        preloaded_state: Any = UNDEFINED,
        *,
        config: Optional[StoreConfig] = None,
        action_types: Optional[ActionTypes] = None,
    ):
        if not callable(reducer):
            raise ConfigurationError(
                "Expected the reducer to be a function.",
                component="create_store",
                config_key="reducer",
            )

        self.config = config or get_default_config()
        self.action_types = action_types or default_action_types

        self._current_reducer = reducer
        self._current_state = preloaded_state
        self._current_listeners: Optional[List[ListenerHandle]] = []
        self._next_listeners: List[ListenerHandle] = self._current_listeners
        self._is_dispatching = False

        self.dispatch({"type": self.action_types.init})

    def _ensure_can_mutate_next_listeners(self) -> None:
        # 迭代中的快照陣列永遠不會被改動
        if self._next_listeners is self._current_listeners:
            self._next_listeners = list(self._current_listeners or ())

    def get_state(self) -> S:
        """
        讀取當前狀態樹。

        Returns:
            最近一次 reducer 返回的狀態

        Raises:
            InvariantViolation: reducer 正在執行
        """
        if self._is_dispatching:
            raise InvariantViolation(
                "You may not call store.get_state() while the reducer is executing. "
                "The reducer has already received the state as an argument. "
                "Pass it down from the top reducer instead of reading it from the store.",
                operation="get_state",
            )
        return self._current_state

    @property
    def state(self) -> S:
        return self.get_state()

    def subscribe(self, listener: Listener) -> ListenerHandle:
        """
        註冊一個變更監聽器，每次 dispatch 完成後都會被呼叫。

        監聽器在每次 dispatch 前被快照：dispatch 期間新增的監聽器
        要到下一次 dispatch 才會被呼叫，期間取消的監聽器在本次仍會被呼叫。

        Args:
            listener: 無參數的回調函數

        Returns:
            ListenerHandle，調用它或其 unsubscribe() 即取消訂閱
        """
        if not callable(listener):
            raise ConfigurationError(
                "Expected the listener to be a function.",
                component="subscribe",
                config_key="listener",
            )

        if self._is_dispatching:
            raise InvariantViolation(
                "You may not call store.subscribe() while the reducer is executing. "
                "If you would like to be notified after the store has been updated, "
                "subscribe from a component and invoke store.get_state() in the callback "
                "to access the latest state.",
                operation="subscribe",
            )

        handle = ListenerHandle(self, listener)
        self._ensure_can_mutate_next_listeners()
        self._next_listeners.append(handle)
        return handle

    def _remove_listener(self, handle: ListenerHandle) -> None:
        if self._is_dispatching:
            raise InvariantViolation(
                "You may not unsubscribe from a store listener while the reducer is executing.",
                operation="unsubscribe",
            )

        self._ensure_can_mutate_next_listeners()
        for index, registered in enumerate(self._next_listeners):
            if registered is handle:
                del self._next_listeners[index]
                break
        self._current_listeners = None

    def dispatch(self, action: Action) -> Action:
        """
        分發一個 action，這是觸發狀態變更的唯一方式。

        Args:
            action: 帶有 "type" 鍵的結構化記錄（dict 或 immutables.Map）

        Returns:
            傳入的 action 本身

        Raises:
            ActionError: action 不是結構化記錄，或沒有 type
            InvariantViolation: 在 reducer 內部呼叫 dispatch
        """
        if not is_plain_object(action):
            raise ActionError(
                f"Actions must be plain dicts, got {type(action).__name__}. "
                "Use custom middleware for other kinds of actions."
            )

        action_type = action.get("type", UNDEFINED)
        if action_type is UNDEFINED:
            raise ActionError(
                'Actions may not have an undefined "type" key. '
                "Have you misspelled a constant?",
                action_type=action_type,
            )

        if self._is_dispatching:
            raise InvariantViolation("Reducers may not dispatch actions.", operation="dispatch")

        try:
            self._is_dispatching = True
            self._current_state = self._current_reducer(self._current_state, action)
        finally:
            self._is_dispatching = False

        listeners = self._current_listeners = self._next_listeners
        for i in range(len(listeners)):
            listeners[i].listener()

        return action

    def replace_reducer(self, next_reducer: Reducer) -> None:
        """
        替換當前使用的 reducer，並 dispatch 私有的 REPLACE action，
        讓新的 slice 取得初始值、重疊的 slice 保留原值。

        Args:
            next_reducer: 新的 reducer
        """
        if not callable(next_reducer):
            raise ConfigurationError(
                "Expected the next_reducer to be a function.",
                component="replace_reducer",
                config_key="next_reducer",
            )

        self._current_reducer = next_reducer
        self.dispatch({"type": self.action_types.replace})

    def observable(self) -> StateObservable:
        return StateObservable(self)

    def select(self, selector: Optional[Callable[[S], Any]] = None) -> Observable:
        """
        選擇狀態的一部分進行觀察。

        Args:
            selector: 一個函數，接收整個狀態並返回希望觀察的部分；None 表示整個狀態

        Returns:
            一個可觀察對象，只在選定的部分改變時發送新值
        """
        if selector is None:
            return self.observable().pipe(ops.distinct_until_changed(comparer=lambda a, b: a is b))

        return self.observable().pipe(
            ops.map(selector),
            ops.distinct_until_changed(),
        )

    def teardown(self) -> None:
        """移除所有監聽器。"""
        for handle in list(self._next_listeners):
            handle.unsubscribe()
        logger.debug("store torn down")

    def __enter__(self) -> "Store[S]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()


def create_store(
    reducer: Reducer,
    preloaded_state: Any = UNDEFINED,
    enhancer: Optional[StoreEnhancer] = None,
    *extra: Any,
    config: Optional[StoreConfig] = None,
    action_types: Optional[ActionTypes] = None,
) -> Store:
    """
    創建一個持有狀態樹的 Store。

    Args:
        reducer: 接收當前狀態與 action、返回下一個狀態的函數
        preloaded_state: 初始狀態；若傳入可調用對象且沒有 enhancer，則視為 enhancer
        enhancer: store enhancer，例如 apply_middleware 的返回值
        config: 執行設定
        action_types: 控制 Action 類型

    Returns:
        新創建的 Store 實例

    Raises:
        ConfigurationError: 傳入多個 enhancer、enhancer 不可調用或 reducer 不可調用
    """
    if (callable(preloaded_state) and callable(enhancer)) or (
        callable(enhancer) and extra and callable(extra[0])
    ):
        raise ConfigurationError(
            "It looks like you are passing several store enhancers to create_store(). "
            "This is not supported. Instead, compose them together to a single function.",
            component="create_store",
            config_key="enhancer",
        )

    if callable(preloaded_state) and enhancer is None:
        enhancer = preloaded_state
        preloaded_state = UNDEFINED

    if enhancer is not None:
        if not callable(enhancer):
            raise ConfigurationError(
                "Expected the enhancer to be a function.",
                component="create_store",
                config_key="enhancer",
            )
        base_create_store = functools.partial(create_store, config=config, action_types=action_types)
        return enhancer(base_create_store)(reducer, preloaded_state)

    return Store(reducer, preloaded_state, config=config, action_types=action_types)
