from __future__ import annotations

from typing import Optional, Protocol

from .model import PolicyConfig


class PolicyConfigRepository(Protocol):
    def get(self) -> Optional[PolicyConfig]:
        """Stored configuration, or None when nothing was saved yet."""

        raise NotImplementedError

    def save(self, config: PolicyConfig) -> None:
        raise NotImplementedError
