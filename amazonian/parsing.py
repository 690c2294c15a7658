from __future__ import annotations

from typing import Any, Dict, Union

import xmltodict


def parse_xml(body: Union[bytes, str]) -> Dict[str, Any]:
    """Decode an XML response into nested dicts.

    A single child element becomes a dict, repeated children become a list.
    Empty bodies decode to ``{}``.
    """

    if not body or not body.strip():
        return {}
    return xmltodict.parse(body)
