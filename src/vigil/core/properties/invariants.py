# どこで: `src/vigil/core/properties/invariants.py`。
# 何を: ValueStore / PropertyRegistry の不変条件をテストで検証する関数を提供する。
# なぜ: 整合性の知識を 1 箇所へ固定し、踏み抜きを早期検知するため。

from __future__ import annotations

from .descriptor import PropertyDescriptor
from .store import ValueStore
from .types import PropertyType, is_stateless
from .values import normalize_value


def assert_invariants(store: ValueStore) -> None:
    """ValueStore と、その registry の不変条件を検査する。

    Notes
    -----
    テスト専用の検査関数。実行時に常時呼ぶことは想定しない。
    """

    registry = store._registry
    descriptors = registry.properties()

    keys = [d.key for d in descriptors]
    assert len(keys) == len(set(keys))
    for descriptor in descriptors:
        assert isinstance(descriptor, PropertyDescriptor)
        assert isinstance(descriptor.kind, PropertyType)
        assert descriptor.min <= descriptor.max
        assert descriptor.min_f <= descriptor.max_f
        assert descriptor.min_deg <= descriptor.max_deg

    categories = registry.categories()
    assert len(categories) == len(set(categories))
    assert categories == list(dict.fromkeys(d.category for d in descriptors))
    for category in categories:
        subs = registry.subcategories(category)
        assert len(subs) == len(set(subs))
        expected = list(dict.fromkeys(d.subcategory for d in descriptors if d.category == category))
        assert subs == expected

    if not store.initialized:
        assert store.snapshot() == {}
        return

    values = store.snapshot()
    stateful = [d for d in descriptors if not is_stateless(d.kind)]
    assert set(values) == {d.key for d in stateful}
    for descriptor in stateful:
        value = values[descriptor.key]
        if value is None:
            # default / path を持たない image_reference だけが None を取り得る。
            assert descriptor.kind is PropertyType.IMAGE_REFERENCE
            continue
        normalized, err = normalize_value(value, descriptor)
        assert err is None, descriptor.key
        assert normalized == value, descriptor.key


__all__ = ["assert_invariants"]
