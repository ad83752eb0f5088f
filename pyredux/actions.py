"""
PyRedux 的 Action 定義模組。

此模組提供 Action 創建器、內部控制用的 Action 類型，以及把 Action 創建器
綁定到 dispatch 的工具。Action 是描述狀態變更意圖的結構化記錄，
至少包含一個 "type" 欄位。
"""
import uuid
from typing import Any, Callable, Dict, Optional, Union

from immutables import Map
from pydantic import BaseModel, ConfigDict

from .errors import ConfigurationError
from .immutable_utils import to_immutable
from .types import ActionCreator, Dispatch
from .utils import is_plain_object


def _random_suffix() -> str:
    return ".".join(uuid.uuid4().hex[:6])


class ActionTypes(BaseModel):
    """
    Store 保留的私有 Action 類型。

    對於任何未知的 action，reducer 必須返回當前狀態；若當前狀態為 UNDEFINED，
    則必須返回初始狀態。應用程式不應直接引用這些類型。
    """
    model_config = ConfigDict(frozen=True)

    namespace: str
    init: str
    replace: str

    def probe_unknown_action(self) -> str:
        """每次呼叫都產生一個新的隨機 action 類型，用於探測 reducer。"""
        return f"{self.namespace}/PROBE_UNKNOWN_ACTION{_random_suffix()}"

    @classmethod
    def generate(cls, namespace: str = "@@redux") -> "ActionTypes":
        """
        產生一組加上隨機後綴的控制 Action 類型。

        Args:
            namespace: 類型前綴，預設為 "@@redux"

        Returns:
            新的 ActionTypes 實例
        """
        return cls(
            namespace=namespace,
            init=f"{namespace}/INIT{_random_suffix()}",
            replace=f"{namespace}/REPLACE{_random_suffix()}",
        )


# 在模組載入時產生一次，可透過 action_types= 參數注入其他實例
default_action_types = ActionTypes.generate()


class ActionPool:
    """
    Action 對象池，用於重用頻繁創建的相同 Action。
    Action 以 immutables.Map 表示，因此可以安全地共享。
    """
    _no_payload_pool: Dict[Any, Map] = {}  # type -> Action (無負載)
    _simple_payload_pool: Dict[Any, Dict[Any, Map]] = {}  # type -> {payload -> Action}
    max_pool_size = 256  # 每個 type 最多池化的負載數量

    @classmethod
    def get(cls, action_type: Any, payload: Any = None) -> Map:
        """
        從池中獲取 Action，如不存在則創建並加入池中。

        Args:
            action_type: Action 的類型
            payload: Action 的負載，默認為 None

        Returns:
            Action 記錄
        """
        if payload is None:
            if action_type not in cls._no_payload_pool:
                cls._no_payload_pool[action_type] = Map(type=action_type, payload=None)
            return cls._no_payload_pool[action_type]

        # 只池化可哈希的基本類型負載
        if isinstance(payload, (int, str, bool, float, tuple, frozenset)):
            key = (type(payload), payload)
            try:
                hash(key)
            except TypeError:
                # tuple 內含不可哈希的元素
                return Map(type=action_type, payload=payload)

            payload_pool = cls._simple_payload_pool.setdefault(action_type, {})
            if key in payload_pool:
                return payload_pool[key]
            action = Map(type=action_type, payload=payload)
            if len(payload_pool) < cls.max_pool_size:
                payload_pool[key] = action
            return action

        return Map(type=action_type, payload=payload)

    @classmethod
    def clear(cls) -> None:
        cls._no_payload_pool.clear()
        cls._simple_payload_pool.clear()


def create_action(action_type: Any, prepare_fn: Optional[Callable[..., Any]] = None) -> ActionCreator:
    """
    創建一個 Action 生成器函數。

    Args:
        action_type: Action 的類型標識符
        prepare_fn: 可選的預處理函數，用於在創建 Action 前處理輸入參數

    Returns:
        一個可調用的函數，用於生成指定類型的 Action

    範例:
        >>> increment = create_action("[Counter] Increment")
        >>> increment()["type"]
        '[Counter] Increment'
        >>> add = create_action("[Counter] Add", lambda amount: amount)
        >>> add(5)["payload"]
        5
    """
    def action_creator(*args: Any, **kwargs: Any) -> Map:
        if prepare_fn:
            payload = prepare_fn(*args, **kwargs)
        elif len(args) == 1 and not kwargs:
            payload = args[0]
        elif args or kwargs:
            payload = dict(zip(range(len(args)), args))
            payload.update(kwargs)
        else:
            return ActionPool.get(action_type)
        return ActionPool.get(action_type, to_immutable(payload))

    action_creator.type = action_type  # type: ignore
    action_creator.__name__ = f"create_{action_type}"

    return action_creator


def bind_action_creator(action_creator: Callable[..., Any], dispatch: Dispatch) -> Callable[..., Any]:
    def bound(*args: Any, **kwargs: Any) -> Any:
        return dispatch(action_creator(*args, **kwargs))

    bound.__name__ = getattr(action_creator, "__name__", "bound_action_creator")
    bound.__wrapped__ = action_creator  # type: ignore
    return bound


def bind_action_creators(
    action_creators: Union[Callable[..., Any], Dict[str, Any]],
    dispatch: Dispatch,
) -> Union[Callable[..., Any], Dict[str, Callable[..., Any]]]:
    """
    把 Action 創建器包裝成會自動 dispatch 的函數。

    傳入單一函數時返回單一包裝函數；傳入字典時返回一個新字典，
    只包含其中可調用的值，每個值都被包裝。

    Args:
        action_creators: Action 創建器函數，或鍵為名稱、值為創建器的字典
        dispatch: store 的 dispatch 函數

    Returns:
        與輸入同形狀的綁定結果

    Raises:
        ConfigurationError: 傳入的既不是函數也不是結構化記錄
    """
    if callable(action_creators):
        return bind_action_creator(action_creators, dispatch)

    if not is_plain_object(action_creators):
        received = "None" if action_creators is None else type(action_creators).__name__
        raise ConfigurationError(
            f"bind_action_creators expected a dict or a function, instead received {received}.",
            component="bind_action_creators",
            config_key="action_creators",
        )

    return {
        key: bind_action_creator(creator, dispatch)
        for key, creator in action_creators.items()
        if callable(creator)
    }
