# どこで: `src/vigil/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 設定ファイルの保存先や自動保存間隔、GUI のキー割り当てをユーザーが指定できるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """vigil の実行時設定。"""

    config_path: Path | None
    config_dir: Path
    autosave_interval_sec: float
    open_key: str
    settings_gui_window_size: tuple[int, int]
    window_pos_settings_gui: tuple[int, int]


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".vigil" / "config.yaml",
        home / ".config" / "vigil" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        x = int(seq[0])
        y = int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc
    return (x, y)


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("vigil")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="vigil/resource/default_config.yaml")


def _merge_section(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping を再帰的に上書きマージした dict を返す。"""

    out = dict(base)
    for key, value in override.items():
        current = out.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            out[key] = _merge_section(current, value)
        else:
            out[key] = value
    return out


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。"""

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_section(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_section(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    config_dir = _as_optional_path(paths.get("config_dir"))
    if config_dir is None:
        raise RuntimeError(
            "paths.config_dir が未設定です（同梱 default_config.yaml を確認してください）"
        )

    autosave = _as_mapping(payload.get("autosave"), key="autosave")
    interval = _as_float(autosave.get("interval_sec"), key="autosave.interval_sec")
    if interval is None:
        raise RuntimeError(
            "autosave.interval_sec が未設定です（同梱 default_config.yaml を確認してください）"
        )
    if interval <= 0:
        raise ValueError(f"autosave.interval_sec は正の値である必要があります: got={interval}")

    ui = _as_mapping(payload.get("ui"), key="ui")
    open_key = str(ui.get("open_key") or "").strip().upper()
    if not open_key:
        raise RuntimeError("ui.open_key が未設定です（同梱 default_config.yaml を確認してください）")

    settings_gui = _as_mapping(ui.get("settings_gui"), key="ui.settings_gui")
    window_size = _as_int_pair(settings_gui.get("window_size"), key="ui.settings_gui.window_size")
    if window_size is None:
        raise RuntimeError(
            "ui.settings_gui.window_size が未設定です（同梱 default_config.yaml を確認してください）"
        )
    window_pos = _as_int_pair(
        settings_gui.get("window_position"),
        key="ui.settings_gui.window_position",
    )
    if window_pos is None:
        raise RuntimeError(
            "ui.settings_gui.window_position が未設定です（同梱 default_config.yaml を確認してください）"
        )

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        config_dir=config_dir,
        autosave_interval_sec=float(interval),
        open_key=open_key,
        settings_gui_window_size=window_size,
        window_pos_settings_gui=window_pos,
    )
    _CONFIG_CACHE = cfg
    return cfg


def config_root_dir() -> Path:
    """設定ファイル（*.toml）を保存する既定ディレクトリを返す。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.vigil/config.yaml` / `~/.config/vigil/config.yaml`
    3) `set_config_path(...)` で指定したパス
    """

    cfg = runtime_config()
    return Path(cfg.config_dir)


__all__ = ["RuntimeConfig", "config_root_dir", "runtime_config", "set_config_path"]
