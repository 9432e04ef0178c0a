# どこで: `src/vigil/__init__.py`。
# 何を: ルート `vigil` パッケージを定義する。
# なぜ: import 起点を `vigil` に統一するため。

from __future__ import annotations

from vigil.api import Config, run_settings_window
from vigil.core.properties import (
    Color,
    InlineAction,
    PropertyDescriptor,
    PropertyType,
    ValidationError,
)

__all__ = [
    "Color",
    "Config",
    "InlineAction",
    "PropertyDescriptor",
    "PropertyType",
    "ValidationError",
    "run_settings_window",
]
