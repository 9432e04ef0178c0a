# どこで: `src/vigil/core/properties/persistence.py`。
# 何を: 設定ファイル（TOML 風のセクション付き `key = value` 行）の path 算出 / load / save を提供する。
# なぜ: GUI で調整した設定を、モジュール単位で再起動後に復元できるようにするため。

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from vigil.core.runtime_config import config_root_dir

from .codec import decode_value, encode_value
from .registry import PropertyRegistry
from .types import is_stateless
from .values import normalize_value

_logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^\s*([A-Za-z0-9_-]+)\s*=\s*(.+?)\s*$")


def _sanitize_filename_fragment(text: str) -> str:
    """ファイル名に埋め込めるように text を正規化して返す。"""

    normalized = re.sub(r"[^A-Za-z0-9._-]+", "_", str(text))
    normalized = normalized.strip("._-")
    return normalized or "unknown"


def default_store_path(module_name: str) -> Path:
    """モジュール名に基づく設定ファイルの既定保存パスを返す。

    Notes
    -----
    パスは `{paths.config_dir}/{module_name}.toml`。
    """

    return config_root_dir() / f"{_sanitize_filename_fragment(module_name)}.toml"


def section_name(text: str) -> str:
    """category/subcategory をセクション名（小文字・空白→`_`）へ正規化して返す。"""

    return re.sub(r"\s+", "_", str(text).strip().lower())


def dumps_store(registry: PropertyRegistry, values: Mapping[str, Any]) -> str:
    """現在値を category → subcategory のセクションにまとめたテキストへ変換して返す。

    Notes
    -----
    - button と値 None の項目は書き出さない。
    - subcategory が空の項目は `[cat.cat]` に入る。
    - セクションと行の順序は登録順（同名に正規化された category は 1 つにまとまる）。
    """

    sections: dict[str, dict[str, list[str]]] = {}
    for descriptor in registry.properties():
        if is_stateless(descriptor.kind):
            continue
        value = values.get(descriptor.key)
        if value is None:
            continue
        cat = section_name(descriptor.category)
        sub = section_name(descriptor.subcategory) if descriptor.subcategory else cat
        line = f"{descriptor.key} = {encode_value(value, descriptor.kind)}"
        sections.setdefault(cat, {}).setdefault(sub, []).append(line)

    lines: list[str] = []
    for cat, subs in sections.items():
        if lines:
            lines.append("")
        lines.append(f"[{cat}]")
        for sub, entries in subs.items():
            lines.append("")
            lines.append(f"\t[{cat}.{sub}]")
            lines.extend(f"\t\t{entry}" for entry in entries)
    return "\n".join(lines) + "\n"


def loads_store(text: str, registry: PropertyRegistry) -> dict[str, Any]:
    """テキストから `key -> 値` を復元して返す。

    Notes
    -----
    `key = value` 形にマッチしない行（セクション見出し・コメント・空行・破損行）は読み飛ばす。
    未登録 key と、decode/正規化に失敗した値も読み飛ばす（既定値が使われる）。
    行は `\\n` だけで区切る（CRLF の `\\r` は行末の空白として落ちる）。
    """

    out: dict[str, Any] = {}
    for lineno, line in enumerate(text.split("\n"), start=1):
        m = _LINE_RE.match(line)
        if m is None:
            continue
        key, raw = m.group(1), m.group(2)
        descriptor = registry.get(key)
        if descriptor is None or is_stateless(descriptor.kind):
            continue
        decoded = decode_value(raw, descriptor.kind)
        if decoded is None:
            _logger.debug("設定値を解釈できないため既定値を使います: line=%d key=%s", lineno, key)
            continue
        normalized, err = normalize_value(decoded, descriptor)
        if err is not None or normalized is None:
            _logger.debug("設定値が種別に合わないため既定値を使います: line=%d key=%s", lineno, key)
            continue
        out[key] = normalized
    return out


def load_store_file(path: Path, registry: PropertyRegistry) -> dict[str, Any]:
    """設定ファイルをロードして `key -> 値` を返す。無ければ空 dict を返す。"""

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        _logger.warning("設定ファイルを読み込めませんでした: path=%s err=%s", path, exc)
        return {}
    return loads_store(text, registry)


def save_store_file(path: Path, registry: PropertyRegistry, values: Mapping[str, Any]) -> None:
    """現在値を path に保存する（一時ファイルへ書いてから置き換える）。

    Raises
    ------
    OSError
        ディレクトリ作成・書き込み・置き換えに失敗した場合。
    """

    payload = dumps_store(registry, values)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError:
        try:
            tmp_path.unlink()
        except OSError:
            pass
        raise


__all__ = [
    "default_store_path",
    "dumps_store",
    "load_store_file",
    "loads_store",
    "save_store_file",
    "section_name",
]
