"""Split a raw feed document into item-scoped fragments."""

from __future__ import annotations

import re
from typing import List

_ITEM_RE = re.compile(r"<item(?:\s[^>]*)?(?<!/)>(.*?)</item\s*>", re.IGNORECASE | re.DOTALL)
_ENTRY_RE = re.compile(r"<entry(?:\s[^>]*)?(?<!/)>(.*?)</entry\s*>", re.IGNORECASE | re.DOTALL)


def split_items(document: str | None) -> List[str]:
    """Return RSS ``<item>`` bodies, or Atom ``<entry>`` bodies when there are no items.

    Unclosed blocks are never matched; an empty or unrecognisable document
    yields an empty list.
    """
    if not document:
        return []
    items = _ITEM_RE.findall(document)
    if items:
        return items
    return _ENTRY_RE.findall(document)
