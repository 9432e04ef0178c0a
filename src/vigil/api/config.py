# どこで: `src/vigil/api/config.py`。
# 何を: 設定エンジンの公開窓口 Config（登録/購読/依存/初期化/取得/更新/保存/破棄）を提供する。
# なぜ: registry・ValueStore・依存・通知・自動保存を 1 つのライフサイクルに束ね、利用側を単純に保つため。

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

from vigil.core.properties import (
    AutosaveScheduler,
    ChangeDispatcher,
    DependencyGraph,
    PropertyDescriptor,
    PropertyRegistry,
    PropertyType,
    ValueStore,
    default_store_path,
    load_store_file,
    normalize_value,
    run_action,
    save_store_file,
)
from vigil.core.runtime_config import runtime_config

_logger = logging.getLogger(__name__)


class Closeable(Protocol):
    def close(self) -> None: ...


class Config:
    """1 モジュール分の設定エンジン。

    典型的な使い方::

        cfg = Config("ExampleModule")
        cfg.register({"type": "switch", "key": "enabled", "name": "Enable", "category": "General"})
        cfg.on_change("enabled", lambda v: print(v))
        cfg.initialize()
        cfg.set("enabled", True)
        cfg.tick()  # dirty なら保存

    Notes
    -----
    - `register` / `add_dependency` は `initialize()` より前に呼ぶ。
    - 外部の tick（`tick()`）が保存をまとめて行う。`set()` 自体はディスクへ書かない。
    """

    def __init__(
        self,
        module_name: str,
        *,
        title: str | None = None,
        path: str | Path | None = None,
        open_key: str | None = None,
    ) -> None:
        if not module_name:
            raise ValueError("module_name が空です")
        self.module_name = str(module_name)
        self.title = str(title) if title else f"{self.module_name} Settings"
        self._explicit_path = None if path is None else Path(str(path)).expanduser()
        self._open_key = None if open_key is None else str(open_key).strip().upper()

        self._registry = PropertyRegistry()
        self._dispatcher = ChangeDispatcher()
        self._dependencies = DependencyGraph()
        self._store = ValueStore(self._registry, self._dispatcher)
        self._autosave = AutosaveScheduler(self._store, self._write)
        self._attached: list[Closeable] = []

        self._open = False
        self._initialized = False
        self._destroyed = False

    # --- 定義 ---
    def register(self, spec: PropertyDescriptor | Mapping[str, object]) -> Config:
        """property を登録して self を返す。

        Raises
        ------
        ValidationError
            spec が不正、または key が重複している場合。
        RuntimeError
            `initialize()` 後に呼んだ場合。
        """

        self._require_not_initialized("register")
        self._registry.register(spec)
        return self

    def on_change(self, key: str, handler: Callable[[Any], Any]) -> Config:
        """key の変更リスナーを追加して self を返す（登録順に呼ばれる）。"""

        self._dispatcher.subscribe(str(key), handler)
        return self

    def add_dependency(self, dependent_key: str, prerequisite_key: str) -> Config:
        """dependent_key を prerequisite_key が真のときだけ表示するようにして self を返す。"""

        self._dependencies.add(dependent_key, prerequisite_key)
        return self

    def hide_property(self, key: str) -> Config:
        """property を常に非表示にして self を返す。"""

        self._registry.hide(key)
        return self

    def attach(self, resource: Closeable) -> Config:
        """`destroy()` 時に close する外部リソース（GUI 等）を登録して self を返す。"""

        self._attached.append(resource)
        return self

    # --- ライフサイクル ---
    @property
    def path(self) -> Path:
        """設定ファイルのパスを返す。"""

        if self._explicit_path is not None:
            return self._explicit_path
        return default_store_path(self.module_name)

    @property
    def open_key(self) -> str:
        """パネル開閉キー名（pyglet.window.key の名前）を返す。"""

        if self._open_key is not None:
            return self._open_key
        return runtime_config().open_key

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """設定ファイルをロードして現在値を作り、初回通知を行う。

        Raises
        ------
        RuntimeError
            二重に初期化した場合、または破棄済みの場合。
        """

        self._require_not_initialized("initialize")
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            _logger.warning("設定ディレクトリを作成できませんでした: path=%s err=%s", path.parent, exc)

        for dependent, prerequisite in self._dependencies.edges().items():
            if dependent not in self._registry or prerequisite not in self._registry:
                _logger.warning(
                    "未登録の property を含む依存です: dependent=%s prerequisite=%s",
                    dependent,
                    prerequisite,
                )

        loaded = load_store_file(path, self._registry)
        self._initialized = True
        self._store.initialize(loaded)

    def destroy(self) -> None:
        """未保存の変更を保存し、リスナーと外部リソースを解放する。二重呼び出しは無視する。"""

        if self._destroyed:
            return
        self._destroyed = True

        if self._initialized and self._store.dirty:
            self.save()

        attached = list(self._attached)
        self._attached.clear()
        for resource in attached:
            try:
                resource.close()
            except Exception:
                _logger.exception("外部リソースの close に失敗しました: module=%s", self.module_name)

        self._dispatcher.clear()
        self._store.clear()
        self._open = False

    # --- 値 ---
    def get(self, key: str) -> Any | None:
        """現在値を返す。未登録なら None。"""

        return self._store.get(key)

    def set(self, key: str, value: Any) -> bool:
        """値を正規化して更新し、変化した場合は True を返す。

        Raises
        ------
        KeyError
            未登録の key の場合。
        ValueError
            値を種別へ変換できない場合、または button の場合。
        RuntimeError
            `initialize()` 前に呼んだ場合。
        """

        self._require_initialized("set")
        descriptor = self._registry.require(key)
        if descriptor.kind is PropertyType.BUTTON:
            raise ValueError(f"button は値を持ちません: key={key}")
        normalized, err = normalize_value(value, descriptor)
        if err is not None:
            raise ValueError(f"値を {descriptor.kind.value} へ変換できません: key={key} value={value!r}")
        return self._store.set_value(key, normalized)

    def reset_to_defaults(self) -> list[str]:
        """button 以外の全 property を既定値へ戻し、変化した key を返す。"""

        self._require_initialized("reset_to_defaults")
        return self._store.reset_to_defaults()

    def snapshot(self) -> dict[str, Any]:
        """現在値のコピーを返す。"""

        return self._store.snapshot()

    @property
    def dirty(self) -> bool:
        """未保存の変更があれば True。"""

        return self._store.dirty

    # --- 保存 ---
    def _write(self) -> bool:
        path = self.path
        try:
            save_store_file(path, self._registry, self._store.snapshot())
        except OSError as exc:
            _logger.warning("設定ファイルを保存できませんでした（次の tick で再試行）: path=%s err=%s", path, exc)
            return False
        return True

    def save(self) -> bool:
        """現在値を保存し、成功したら True を返す。失敗時は dirty を残す。"""

        self._require_initialized("save")
        if not self._write():
            return False
        self._store.mark_clean()
        return True

    def tick(self) -> bool:
        """外部 tick。dirty なら保存し、保存した場合は True を返す。"""

        if not self._initialized or self._destroyed:
            return False
        return self._autosave.tick()

    # --- 表示 ---
    def descriptor(self, key: str) -> PropertyDescriptor | None:
        return self._registry.get(key)

    def properties(self) -> list[PropertyDescriptor]:
        """登録順の descriptor リストを返す。"""

        return self._registry.properties()

    def categories(self) -> list[str]:
        """初出順の category リストを返す。"""

        return self._registry.categories()

    def subcategories(self, category: str) -> list[str]:
        """category 内の subcategory を初出順で返す。"""

        return self._registry.subcategories(category)

    def section(self, category: str, subcategory: str) -> list[PropertyDescriptor]:
        return self._registry.in_section(category, subcategory)

    def is_visible(self, key: str | PropertyDescriptor) -> bool:
        """property を表示してよいなら True を返す（hidden と 1 段の依存を見る）。"""

        descriptor = key if isinstance(key, PropertyDescriptor) else self._registry.require(key)
        # hide_property() 後の最新 descriptor で判定する。
        current = self._registry.get(descriptor.key) or descriptor
        return self._dependencies.is_visible(current, self._store.snapshot())

    def trigger_action(self, key: str) -> bool:
        """button の action を実行し、成功したら True を返す（例外はログのみ）。"""

        descriptor = self._registry.require(key)
        if descriptor.kind is not PropertyType.BUTTON:
            raise ValueError(f"button ではありません: key={key}")
        return run_action(key, descriptor.action, label="button")

    def trigger_inline_action(self, key: str) -> bool:
        """inline action を実行し、成功したら True を返す（例外はログのみ）。"""

        descriptor = self._registry.require(key)
        inline = descriptor.inline_action
        if inline is None:
            raise ValueError(f"inline action が未設定です: key={key}")
        return run_action(key, inline.action, label=f"inline action '{inline.name}'")

    # --- パネル開閉 ---
    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def toggle_open(self) -> bool:
        """パネルの開閉を切り替え、切り替え後の状態を返す。"""

        self._open = not self._open
        return self._open

    def handle_key_press(self, key_name: str) -> bool:
        """押されたキー名が開閉キーならパネルを切り替えて True を返す。"""

        if str(key_name).strip().upper() != self.open_key:
            return False
        self.toggle_open()
        return True

    # --- 内部 ---
    def _require_not_initialized(self, op: str) -> None:
        if self._destroyed:
            raise RuntimeError(f"破棄済みの Config です: op={op} module={self.module_name}")
        if self._initialized:
            raise RuntimeError(f"initialize() 後には呼べません: op={op} module={self.module_name}")

    def _require_initialized(self, op: str) -> None:
        if self._destroyed:
            raise RuntimeError(f"破棄済みの Config です: op={op} module={self.module_name}")
        if not self._initialized:
            raise RuntimeError(f"initialize() 前には呼べません: op={op} module={self.module_name}")


__all__ = ["Closeable", "Config"]
