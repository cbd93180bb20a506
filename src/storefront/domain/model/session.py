"""Identity of the acting user, as issued by the (external) auth flow."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:

    user_id: int
    token: str

    @property
    def auth_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}
