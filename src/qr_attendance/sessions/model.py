from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionCode:
    """The rotating payload shown as a QR code. Never persisted."""

    value: str
    window_index: int
    generated_at_ms: int
    validity_window_ms: int

    @property
    def expires_at_ms(self) -> int:
        return self.generated_at_ms + self.validity_window_ms
