from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any


class ResetType(str, Enum):
    default = "default"
    zero = "zero"


@dataclass(frozen=True)
class ResetKeyDescriptor:
    reset_type: ResetType
    message: str
    # Reset operations never grant credits; kept for the plugin's response contract.
    credits_granted: int = 0

    def to_api(self) -> dict[str, Any]:
        return {
            "resetType": self.reset_type.value,
            "creditsGranted": int(self.credits_granted),
            "message": self.message,
        }


_BUILTIN_RESET_KEYS: dict[str, ResetKeyDescriptor] = {
    "ALETO_RESET_DEFAULT_2024": ResetKeyDescriptor(
        reset_type=ResetType.default,
        message="Credits reset to default (2 credits)",
    ),
    "ALETO_RESET_ZERO_2024": ResetKeyDescriptor(
        reset_type=ResetType.zero,
        message="Credits reset to zero",
    ),
    "DEV_RESET_CREDITS_2024": ResetKeyDescriptor(
        reset_type=ResetType.default,
        message="Development reset to default (2 credits)",
    ),
    "ALETO_ADMIN_RESET_2024": ResetKeyDescriptor(
        reset_type=ResetType.default,
        message="Admin reset to default (2 credits)",
    ),
}


class ResetKeyTable:
    """Read-only reset-key lookup; exact, case-sensitive string match."""

    def __init__(self, entries: Mapping[str, ResetKeyDescriptor]) -> None:
        self._entries: Mapping[str, ResetKeyDescriptor] = MappingProxyType(dict(entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._entries

    def lookup(self, key: object) -> ResetKeyDescriptor | None:
        if not isinstance(key, str):
            return None
        return self._entries.get(key)


def build_reset_key_table() -> ResetKeyTable:
    return ResetKeyTable(_BUILTIN_RESET_KEYS)
