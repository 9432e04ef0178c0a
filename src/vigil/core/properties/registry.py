# どこで: `src/vigil/core/properties/registry.py`。
# 何を: 登録順を保った PropertyDescriptor の集合と、category/subcategory の表示順を管理する。
# なぜ: 表示・永続化・リセットが同じ順序を共有できるようにするため。

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import replace

from .descriptor import PropertyDescriptor, ValidationError
from .descriptor_spec import descriptor_from_spec


class PropertyRegistry:
    """key -> PropertyDescriptor を登録順で保持する。

    Notes
    -----
    - 同じ key の再登録は ValidationError（上書きしない）。
    - category は初出順・重複無し。subcategory は category 内での初出順。
    """

    def __init__(self) -> None:
        self._by_key: dict[str, PropertyDescriptor] = {}
        self._categories: list[str] = []
        self._subcategories: dict[str, list[str]] = {}

    def register(self, spec: PropertyDescriptor | Mapping[str, object]) -> PropertyDescriptor:
        """spec を検証して登録し、登録された descriptor を返す。

        Raises
        ------
        ValidationError
            spec が不正、または key が登録済みの場合。
        """

        descriptor = descriptor_from_spec(spec)
        if descriptor.key in self._by_key:
            raise ValidationError(f"key が重複しています: key={descriptor.key}")

        self._by_key[descriptor.key] = descriptor

        category = descriptor.category
        if category not in self._subcategories:
            self._categories.append(category)
            self._subcategories[category] = []
        subs = self._subcategories[category]
        if descriptor.subcategory not in subs:
            subs.append(descriptor.subcategory)
        return descriptor

    def get(self, key: str) -> PropertyDescriptor | None:
        """登録済みの descriptor を返す。未登録なら None。"""

        return self._by_key.get(key)

    def require(self, key: str) -> PropertyDescriptor:
        """登録済みの descriptor を返す。未登録なら KeyError。"""

        descriptor = self._by_key.get(key)
        if descriptor is None:
            raise KeyError(f"未登録の property です: key={key}")
        return descriptor

    def hide(self, key: str) -> PropertyDescriptor:
        """descriptor を hidden=True に差し替えて返す。"""

        descriptor = replace(self.require(key), hidden=True)
        self._by_key[key] = descriptor
        return descriptor

    def properties(self) -> list[PropertyDescriptor]:
        """登録順の descriptor リストを返す。"""

        return list(self._by_key.values())

    def categories(self) -> list[str]:
        """初出順の category リストを返す。"""

        return list(self._categories)

    def subcategories(self, category: str) -> list[str]:
        """category 内の subcategory を初出順で返す（"" を含み得る）。"""

        return list(self._subcategories.get(category, []))

    def in_section(self, category: str, subcategory: str) -> list[PropertyDescriptor]:
        """(category, subcategory) に属する descriptor を登録順で返す。"""

        return [
            d
            for d in self._by_key.values()
            if d.category == category and d.subcategory == subcategory
        ]

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[PropertyDescriptor]:
        return iter(list(self._by_key.values()))

    def __len__(self) -> int:
        return len(self._by_key)


__all__ = ["PropertyRegistry"]
