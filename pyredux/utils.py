"""
PyRedux 的基礎工具：UNDEFINED 哨兵值、結構化記錄判斷、函數組合與開發期警告。
"""

import functools
import logging
from typing import Any, Callable

from immutables import Map


logger = logging.getLogger("pyredux")


class _Undefined:
    """
    表示「尚未有值」的哨兵。

    None 是合法的狀態值，因此 reducer 以 UNDEFINED 作為 slice 尚未初始化的標記。
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED: Any = _Undefined()


def is_plain_object(obj: Any) -> bool:
    """
    判斷傳入的值是否為單純的結構化記錄。

    只有型別恰好為 dict 或 immutables.Map 的值會被接受；
    子類別實例、一般類別實例、None 與純量都會被拒絕。

    Args:
        obj: 任意值

    Returns:
        是否為結構化記錄
    """
    return type(obj) is dict or type(obj) is Map


def compose(*funcs: Callable[..., Any]) -> Callable[..., Any]:
    """
    由右至左組合多個單參數函數。

    compose(f, g, h)(x) 等同於 f(g(h(x)))；最右側的函數可以接收任意參數。

    Args:
        *funcs: 要組合的函數

    Returns:
        組合後的函數；沒有函數時為恆等函數，只有一個時直接返回該函數
    """
    if not funcs:
        return lambda arg: arg

    if len(funcs) == 1:
        return funcs[0]

    return functools.reduce(
        lambda f, g: lambda *args, **kwargs: f(g(*args, **kwargs)),
        funcs,
    )


def warning(message: str) -> None:
    """在 pyredux logger 上記錄開發期警告，不會拋出異常。"""
    logger.warning(message)
