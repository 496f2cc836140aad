from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..common.datetime_utils import format_datetime, format_time


@dataclass(frozen=True)
class Shift:
    """Domain entity: a named working window (time of day, no date)."""

    shift_id: int
    name: str
    start_time: time
    end_time: time
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "name": self.name,
            "start_time": format_time(self.start_time),
            "end_time": format_time(self.end_time),
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    def brief(self) -> dict:
        return {
            "id": self.shift_id,
            "name": self.name,
            "start_time": format_time(self.start_time),
            "end_time": format_time(self.end_time),
        }
