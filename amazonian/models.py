from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


def _child(node: Any, name: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(name)
    return None


def _to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(str(value).strip())
    except ValueError:
        return 0


def _text(value: Any) -> Optional[str]:
    # Elements carrying attributes decode to {"@attr": ..., "#text": ...}.
    if isinstance(value, Mapping):
        value = value.get("#text")
    if value is None:
        return None
    return str(value)


@dataclass
class Item:
    """A single product from an ItemLookup or ItemSearch response.

    ``raw`` keeps the decoded ``Item`` element; accessors return ``None``
    when the expected fields are missing.
    """

    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> Optional[str]:
        return _text(_child(_child(self.raw, "ItemAttributes"), "Title"))

    @property
    def asin(self) -> Optional[str]:
        return _text(_child(self.raw, "ASIN"))

    @property
    def detail_page_url(self) -> Optional[str]:
        return _text(_child(self.raw, "DetailPageURL"))


@dataclass
class Search:
    """An ItemSearch response with its items boxed up as :class:`Item`."""

    raw: Dict[str, Any] = field(default_factory=dict)
    items: List[Item] = field(default_factory=list)

    @property
    def total_results(self) -> int:
        return _to_int(_child(_child(self.raw, "Items"), "TotalResults"))


def decode_item(mapping: Any) -> Item:
    if not isinstance(mapping, Mapping):
        return Item()
    return Item(raw=dict(mapping))


def decode_lookup(response: Any) -> Item:
    """Pick the first ``Item`` out of a decoded ItemLookup response."""

    entry = _child(_child(_child(response, "ItemLookupResponse"), "Items"), "Item")
    if isinstance(entry, list):
        entry = entry[0] if entry else None
    return decode_item(entry)


def decode_search(mapping: Any) -> Search:
    raw = dict(mapping) if isinstance(mapping, Mapping) else {}
    search = Search(raw=raw)
    entries = _child(_child(raw, "Items"), "Item")
    if entries is None:
        return search

    # The XML decoder collapses a lone <Item> into a mapping and keeps
    # repeated ones as a list.
    if search.total_results > 1 and isinstance(entries, list):
        search.items = [decode_item(entry) for entry in entries]
    elif isinstance(entries, list):
        search.items = [decode_item(entry) for entry in entries[:1]]
    else:
        search.items = [decode_item(entries)]
    return search
