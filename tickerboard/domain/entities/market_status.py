"""
Domain entity describing whether the market is open right now.
Recomputed on every request; never persisted.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MarketStatus:
    is_open: bool
    message: str
    current_time: str
    current_date: str

    def to_dict(self) -> dict:
        return {
            "isOpen": self.is_open,
            "message": self.message,
            "currentTime": self.current_time,
            "currentDate": self.current_date,
        }
