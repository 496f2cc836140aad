from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Role:
    role_id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.role_id, "name": self.name}
