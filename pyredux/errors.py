"""
PyRedux 錯誤處理模組。

所有由 store、reducer 組合器與中介軟體拋出的異常都繼承自 PyReduxError，
並攜帶結構化的 details，方便記錄或上報。
"""

import traceback
from typing import Any, Dict, Optional


class PyReduxError(Exception):
    """所有 PyRedux 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.traceback = "".join(traceback.format_stack()[:-1])

    def to_dict(self) -> Dict[str, Any]:
        """
        將錯誤轉為可序列化的字典。

        Returns:
            包含錯誤類型、訊息與細節的字典
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
        }

    def __str__(self) -> str:
        return self.message


class ConfigurationError(PyReduxError):
    """建構參數或呼叫參數格式錯誤。"""

    def __init__(self, message: str, component: str, config_key: Optional[str] = None, **kwargs: Any) -> None:
        details = {"component": component, "config_key": config_key}
        details.update(kwargs)
        super().__init__(message, details)
        self.component = component
        self.config_key = config_key


class ActionError(ConfigurationError):
    """被 dispatch 拒絕的 Action。"""

    def __init__(self, message: str, action_type: Any = None, **kwargs: Any) -> None:
        super().__init__(message, component="dispatch", config_key="action", action_type=repr(action_type), **kwargs)
        self.action_type = action_type


class MiddlewareError(ConfigurationError):
    """中介軟體建構期間的錯誤用法。"""

    def __init__(self, message: str, middleware_name: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message, component="apply_middleware", middleware_name=middleware_name, **kwargs)
        self.middleware_name = middleware_name


class InvariantViolation(PyReduxError):
    """在禁止的時機呼叫了 store 操作（例如 reducer 執行期間）。"""

    def __init__(self, message: str, operation: str, **kwargs: Any) -> None:
        details = {"operation": operation}
        details.update(kwargs)
        super().__init__(message, details)
        self.operation = operation


class ReducerError(PyReduxError):
    """與 Reducer 相關的錯誤。"""

    def __init__(self, message: str, reducer_name: str, action_type: Any = None, state: Any = None, **kwargs: Any) -> None:
        details = {"reducer_name": reducer_name, "action_type": repr(action_type)}
        details.update(kwargs)
        super().__init__(message, details)
        self.reducer_name = reducer_name
        self.action_type = action_type
        self.state = state


class ShapeError(ReducerError):
    """Reducer 在初始化探測時返回了 UNDEFINED。"""


class StateError(ReducerError):
    """Reducer 在實際 dispatch 時返回了 UNDEFINED。"""
