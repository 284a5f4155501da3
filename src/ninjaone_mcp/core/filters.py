"""
Helpers for NinjaOne's device filter (``df``) grammar.
"""

from __future__ import annotations

from typing import Iterable, Literal, Optional, Sequence, Union
from urllib.parse import quote

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"

Clause = Union[str, None, Literal[False]]


def encode_df(clauses: Iterable[Clause]) -> Optional[str]:
    """
    Join present clauses with " AND " and percent-encode the result.

    Absent entries (None, False, "") are skipped. Returns None, not "",
    when nothing is left.
    Example: encode_df(["org = 1", None, "online"]) -> 'org%20%3D%201%20AND%20online'
    """
    present = [c for c in clauses if c]
    if not present:
        return None
    return quote(" AND ".join(present), safe=_URI_COMPONENT_SAFE)


def build_device_filter(
    *,
    org_id: Optional[Union[int, str]] = None,
    status: Optional[str] = None,
    class_in: Optional[Sequence[str]] = None,
    online: Optional[bool] = None,
) -> Optional[str]:
    """Translate structured device filters into an encoded ``df`` value."""
    return encode_df(
        [
            f"org = {org_id}" if org_id else None,
            f"status eq {status}" if status else None,
            f"class in ({','.join(class_in)})" if class_in else None,
            ("online" if online else "offline") if isinstance(online, bool) else None,
        ]
    )


__all__ = ["encode_df", "build_device_filter"]
