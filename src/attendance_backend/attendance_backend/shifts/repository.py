from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def create(self, *, name: str, start_time: time, end_time: time) -> int:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Shift]:
        """Ordered by name ascending."""

        raise NotImplementedError

    def update(self, *, shift_id: int, name: str, start_time: time, end_time: time) -> bool:
        raise NotImplementedError

    def delete(self, shift_id: int) -> bool:
        """Raises ConstraintViolation(ROW_REFERENCED) while schedules point at the shift."""

        raise NotImplementedError
