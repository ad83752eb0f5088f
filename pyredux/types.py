"""
PyRedux 的共用類型定義。
"""
from typing import Any, Callable, Mapping, TypeVar, Union

from immutables import Map
from typing_extensions import Protocol, TypeAlias, runtime_checkable


S = TypeVar("S")

# Action 是至少帶有 "type" 鍵的結構化記錄
Action: TypeAlias = Union[Mapping[str, Any], Map]

Reducer: TypeAlias = Callable[[Any, Action], Any]
Listener: TypeAlias = Callable[[], None]
Dispatch: TypeAlias = Callable[[Action], Any]
GetState: TypeAlias = Callable[[], Any]
NextDispatch: TypeAlias = Dispatch
MiddlewareFunction: TypeAlias = Callable[[NextDispatch], Dispatch]


class ActionCreator(Protocol):
    """由 create_action 產生、帶有 type 屬性的 Action 創建器。"""
    type: Any

    def __call__(self, *args: Any, **kwargs: Any) -> Map: ...


@runtime_checkable
class MiddlewareAPIProtocol(Protocol):
    """傳給每個中介軟體工廠的受限 store 介面。"""

    def get_state(self) -> Any: ...

    def dispatch(self, action: Action) -> Any: ...


Middleware: TypeAlias = Callable[[MiddlewareAPIProtocol], MiddlewareFunction]
StoreCreator: TypeAlias = Callable[..., Any]
StoreEnhancer: TypeAlias = Callable[[StoreCreator], StoreCreator]
