"""
PyRedux：單一狀態樹、純函數 reducer 與可組合中介軟體的同步狀態容器。
"""

from .errors import (
    PyReduxError, ConfigurationError, ActionError, MiddlewareError,
    InvariantViolation, ReducerError, ShapeError, StateError,
)
from .config import StoreConfig, get_default_config
from .utils import UNDEFINED, compose, is_plain_object
from .actions import ActionTypes, default_action_types, create_action, bind_action_creators
from .reducers import combine_reducers, create_reducer, on
from .store import Store, ListenerHandle, StateObservable, StoreSubscription, create_store
from .middleware import (
    MiddlewareAPI, EnhancedStore, apply_middleware, BaseMiddleware, LoggerMiddleware,
)
from .immutable_utils import to_immutable, to_dict

__version__ = "0.1.0"

__all__ = [
    # Errors
    "PyReduxError", "ConfigurationError", "ActionError", "MiddlewareError",
    "InvariantViolation", "ReducerError", "ShapeError", "StateError",

    # Config
    "StoreConfig", "get_default_config",

    # Utils
    "UNDEFINED", "compose", "is_plain_object",

    # Actions
    "ActionTypes", "default_action_types", "create_action", "bind_action_creators",

    # Reducers
    "combine_reducers", "create_reducer", "on",

    # Store
    "Store", "ListenerHandle", "StateObservable", "StoreSubscription", "create_store",

    # Middleware
    "MiddlewareAPI", "EnhancedStore", "apply_middleware", "BaseMiddleware", "LoggerMiddleware",

    # Immutable Utils
    "to_immutable", "to_dict",
]
