"""
PyRedux 的中介軟體模組。

apply_middleware 建立一個 store enhancer，把 dispatch 包進由中介軟體組成的鏈中。
每個中介軟體的形狀為 middleware(api)(next_dispatch)(action)，
列表中的第一個中介軟體位於最外層，最先看到 action。
"""

import inspect
import logging
from typing import Any, Callable, Optional

from .errors import MiddlewareError
from .immutable_utils import to_dict
from .types import Action, Dispatch, GetState, Middleware, MiddlewareFunction, NextDispatch, StoreCreator, StoreEnhancer
from .utils import compose


class MiddlewareAPI:
    """
    交給中介軟體工廠的受限 store 介面。

    dispatch 在每次呼叫時才查找管線目前的 dispatch，
    因此中介軟體透過它發出的 action 會重新經過整條鏈。
    """
    __slots__ = ("get_state", "_resolve_dispatch")

    def __init__(self, get_state: GetState, resolve_dispatch: Callable[[], Dispatch]):
        self.get_state = get_state
        self._resolve_dispatch = resolve_dispatch

    def dispatch(self, action: Action, *args: Any, **kwargs: Any) -> Any:
        return self._resolve_dispatch()(action, *args, **kwargs)


class EnhancedStore:
    """
    apply_middleware 返回的 store。

    除了 dispatch 之外，所有操作都直接委派給底層 store，
    因此讀到的永遠是真正的狀態。
    """

    def __init__(self, store: Any, dispatch: Dispatch):
        self._store = store
        self.dispatch = dispatch

    def get_state(self) -> Any:
        return self._store.get_state()

    @property
    def state(self) -> Any:
        return self._store.get_state()

    def subscribe(self, listener):
        return self._store.subscribe(listener)

    def replace_reducer(self, next_reducer) -> None:
        self._store.replace_reducer(next_reducer)

    def observable(self):
        return self._store.observable()

    def select(self, selector=None):
        return self._store.select(selector)

    def teardown(self) -> None:
        self._store.teardown()

    def __enter__(self) -> "EnhancedStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._store, name)


def apply_middleware(*middlewares: Middleware) -> StoreEnhancer:
    """
    創建一個把中介軟體套用到 dispatch 上的 store enhancer。

    Args:
        *middlewares: 中介軟體工廠；傳入類別時會先實例化

    Returns:
        store enhancer，交給 create_store 使用

    範例:
        >>> store = create_store(reducer, apply_middleware(LoggerMiddleware))
    """
    def enhancer(create_store: StoreCreator) -> StoreCreator:
        def enhanced_create_store(*args: Any, **kwargs: Any) -> EnhancedStore:
            store = create_store(*args, **kwargs)
            # 類別在每個 store 建立時各自實例化
            factories = [m() if inspect.isclass(m) else m for m in middlewares]

            def dispatch(*_args: Any, **_kwargs: Any) -> Any:
                raise MiddlewareError(
                    "Dispatching while constructing your middleware is not allowed. "
                    "Other middleware would not be applied to this dispatch."
                )

            # 以閉包讀取 dispatch，建構完成後自動指向組合好的鏈
            api = MiddlewareAPI(store.get_state, lambda: dispatch)
            chain = [middleware(api) for middleware in factories]
            dispatch = compose(*chain)(store.dispatch)

            return EnhancedStore(store, dispatch)

        return enhanced_create_store

    return enhancer


# ———— Base Middleware ————
class BaseMiddleware:
    """
    基礎中介類，以三個鉤子實現中介軟體協定。

    子類只需覆寫需要的鉤子；dispatch 過程中拋出的異常會先交給 on_error，
    然後繼續向外拋出。
    """

    def __call__(self, api: MiddlewareAPI) -> MiddlewareFunction:
        def middleware(next_dispatch: NextDispatch) -> Dispatch:
            def dispatch(action: Action) -> Any:
                self.on_next(action, api.get_state())
                try:
                    result = next_dispatch(action)
                except Exception as err:
                    self.on_error(err, action)
                    raise
                self.on_complete(api.get_state(), action)
                return result
            return dispatch
        return middleware

    def on_next(self, action: Any, prev_state: Any) -> None:
        """
        在 action 發送給下一層之前調用。

        Args:
            action: 正在 dispatch 的 Action
            prev_state: dispatch 之前的 state
        """
        pass

    def on_complete(self, next_state: Any, action: Any) -> None:
        """
        在下一層處理完 action 之後調用。

        Args:
            next_state: dispatch 之後的最新 state
            action: 剛剛 dispatch 的 Action
        """
        pass

    def on_error(self, error: Exception, action: Any) -> None:
        """
        如果 dispatch 過程中拋出異常，則調用此鉤子。

        Args:
            error: 拋出的異常
            action: 導致異常的 Action
        """
        pass


# ———— LoggerMiddleware ————
class LoggerMiddleware(BaseMiddleware):
    """
    日誌中介，記錄每個 action 發送前和發送後的 state。

    使用場景:
    - 偵錯時需要觀察每次 state 的變化。
    - 確保 action 的執行順序正確。
    """

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    @staticmethod
    def _action_type(action: Any) -> Any:
        return action.get("type") if hasattr(action, "get") else action

    def on_next(self, action: Any, prev_state: Any) -> None:
        action_type = self._action_type(action)
        self.logger.log(self.level, "dispatching %s", action_type)
        self.logger.log(self.level, "state before %s: %s", action_type, to_dict(prev_state))

    def on_complete(self, next_state: Any, action: Any) -> None:
        self.logger.log(self.level, "state after %s: %s", self._action_type(action), to_dict(next_state))

    def on_error(self, error: Exception, action: Any) -> None:
        self.logger.error("error in %s: %s", self._action_type(action), error)
