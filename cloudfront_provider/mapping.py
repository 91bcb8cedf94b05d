"""
Benders that translate between nested configuration blocks and CloudFront API objects.

Configuration blocks are lists holding at most one object, sets of values are plain lists.
The API wraps nested objects directly and uses {"Quantity": n, "Items": [...]} for lists.
"""
from typing import Any, Optional

from cloudfront_provider.json_bender import Bender, Mapping, bend


class Unblock(Bender):
    """
    Configuration block -> API object.
    An absent block (no list, empty list or null element) yields None.
    """

    def __init__(self, mapping: Mapping):
        self._mapping = mapping

    def execute(self, source: Any) -> Any:
        if isinstance(source, list) and source and source[0] is not None:
            return bend(self._mapping, source[0], strip_nulls=True)
        return None


class Block(Bender):
    """
    API object -> configuration block.
    Objects without any value are dropped, unless keep_empty is set.
    """

    def __init__(self, mapping: Mapping, keep_empty: bool = False):
        self._mapping = mapping
        self._keep_empty = keep_empty

    def execute(self, source: Any) -> Any:
        if not isinstance(source, dict):
            return None
        flat = bend(self._mapping, source, strip_nulls=True)
        return [flat] if flat or self._keep_empty else None


class ToItems(Bender):
    """
    Set of values -> API list with Quantity and Items.
    Items is left out for an empty set, Quantity is always sent.
    """

    def __init__(self, item_mapping: Optional[Mapping] = None):
        self._item_mapping = item_mapping

    def execute(self, source: Any) -> Any:
        if not isinstance(source, list):
            return None
        if self._item_mapping is None:
            items = [item for item in source if item != ""]
        else:
            items = [bend(self._item_mapping, item, strip_nulls=True) for item in source if item]
        result = {"Quantity": len(items)}
        if items:
            result["Items"] = items
        return result


class FromItems(Bender):
    """
    API list with Quantity and Items -> configuration block holding the set under `items`.
    """

    def __init__(self, item_mapping: Optional[Mapping] = None, keep_empty: bool = False):
        self._item_mapping = item_mapping
        self._keep_empty = keep_empty

    def execute(self, source: Any) -> Any:
        if not isinstance(source, dict):
            return None
        items = source.get("Items") or []
        if self._item_mapping is not None:
            items = [bend(self._item_mapping, item, strip_nulls=True) for item in items]
        if items:
            return [{"items": items}]
        return [{}] if self._keep_empty else None
