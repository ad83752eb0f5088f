"""Store configuration for pyredux."""

import functools
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict


ENV_MODE = "PYREDUX_ENV"
ENV_WARN_UNEXPECTED_KEYS = "PYREDUX_WARN_UNEXPECTED_KEYS"


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


class StoreConfig(BaseModel):
    """
    Store 與 reducer 組合器的執行設定。

    Attributes:
        production: 生產模式下關閉所有開發期診斷（缺少 reducer、非預期的 state key）
        warn_unexpected_keys: 是否對 state 中非預期的 key 發出警告
    """
    model_config = ConfigDict(frozen=True)

    production: bool = False
    warn_unexpected_keys: bool = True

    @property
    def diagnostics(self) -> bool:
        return not self.production

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """
        從環境變數讀取設定。

        PYREDUX_ENV=production 啟用生產模式；
        PYREDUX_WARN_UNEXPECTED_KEYS 接受 1/0、true/false 等布林字串。
        """
        mode = os.environ.get(ENV_MODE, "development").strip().lower()
        return cls(
            production=mode == "production",
            warn_unexpected_keys=_env_bool(os.environ.get(ENV_WARN_UNEXPECTED_KEYS), True),
        )


@functools.lru_cache(maxsize=None)
def get_default_config() -> StoreConfig:
    """返回從環境變數建立並快取的預設設定。"""
    return StoreConfig.from_env()
