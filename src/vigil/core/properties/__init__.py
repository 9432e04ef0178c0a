# どこで: `src/vigil/core/properties/__init__.py`。
# 何を: 設定エンジン中核（定義/値/永続化/依存/通知/自動保存）の公開エイリアスをまとめる。
# なぜ: API 層から最小インポートで使えるようにするため。

from .autosave import AutosaveScheduler
from .codec import decode_value, encode_value
from .dependencies import DependencyGraph, is_enabled_value
from .descriptor import InlineAction, PropertyDescriptor, ValidationError
from .descriptor_spec import descriptor_from_spec
from .dispatch import ChangeDispatcher, run_action
from .persistence import (
    default_store_path,
    dumps_store,
    load_store_file,
    loads_store,
    save_store_file,
)
from .registry import PropertyRegistry
from .store import ValueStore
from .types import Color, PropertyType, ValueFamily, value_family
from .values import initial_value, normalize_value

__all__ = [
    "AutosaveScheduler",
    "decode_value",
    "encode_value",
    "DependencyGraph",
    "is_enabled_value",
    "InlineAction",
    "PropertyDescriptor",
    "ValidationError",
    "descriptor_from_spec",
    "ChangeDispatcher",
    "run_action",
    "default_store_path",
    "dumps_store",
    "load_store_file",
    "loads_store",
    "save_store_file",
    "PropertyRegistry",
    "ValueStore",
    "Color",
    "PropertyType",
    "ValueFamily",
    "value_family",
    "initial_value",
    "normalize_value",
]
