"""Bluetooth address normalization.

Both audio backends embed addresses in underscore form
(``bluez_card.AA_BB_CC_DD_EE_FF``) while users and BlueZ use colon form, so
every comparison goes through :func:`normalize_address` first.
"""

from __future__ import annotations

import re

from btprofile.core.errors import InvalidAddressError

_ADDRESS_RE = re.compile(r"^[0-9A-F]{2}(?:[:_][0-9A-F]{2}){5}$", re.IGNORECASE)


def normalize_address(value: str) -> str:
    return value.strip().replace(":", "_").upper()


def parse_address(value: str) -> str:
    candidate = value.strip()
    if not _ADDRESS_RE.match(candidate):
        raise InvalidAddressError(f"'{value}' is not a valid Bluetooth address")
    return normalize_address(candidate)


def format_address(value: str) -> str:
    return normalize_address(value).replace("_", ":")
