"""Client-side records with a three-state sync marker."""
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional

from focusboard.domain import iso_utc, utc_now


class SyncState(str, Enum):
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


@dataclass
class Task:
    local_id: int
    title: str
    description: str = ""
    completed: bool = False
    favorited: bool = False
    date: Optional[str] = None
    time: Optional[str] = None
    server_id: Optional[int] = None
    sync_state: SyncState = SyncState.PENDING

    @property
    def synced(self) -> bool:
        return self.sync_state is SyncState.SYNCED

    def to_payload(self) -> dict:
        return {
            "id": self.local_id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "favorited": self.favorited,
            "date": self.date,
            "time": self.time,
        }

    @classmethod
    def from_server(cls, data: dict) -> "Task":
        return cls(
            local_id=int(data["id"]),
            title=data["title"],
            description=data.get("description") or "",
            completed=bool(data.get("completed")),
            favorited=bool(data.get("favorited")),
            date=data.get("date"),
            time=data.get("time"),
            server_id=data.get("serverId"),
            sync_state=SyncState.SYNCED,
        )

    def to_cache(self) -> dict:
        data = asdict(self)
        data["sync_state"] = self.sync_state.value
        return data

    @classmethod
    def from_cache(cls, data: dict) -> "Task":
        data = dict(data)
        data["sync_state"] = SyncState(data.get("sync_state", SyncState.PENDING.value))
        return cls(**data)


@dataclass
class Goal:
    local_id: int
    title: str
    description: str = ""
    category: str = "short"
    target_date: Optional[str] = None
    completed: bool = False
    created_at: str = field(default_factory=lambda: iso_utc(utc_now()))
    server_id: Optional[int] = None
    sync_state: SyncState = SyncState.PENDING

    @property
    def synced(self) -> bool:
        return self.sync_state is SyncState.SYNCED

    def to_payload(self) -> dict:
        return {
            "id": self.local_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "targetDate": self.target_date,
            "completed": self.completed,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_server(cls, data: dict) -> "Goal":
        return cls(
            local_id=int(data["id"]),
            title=data["title"],
            description=data.get("description") or "",
            category=data.get("category") or "short",
            target_date=data.get("targetDate"),
            completed=bool(data.get("completed")),
            created_at=data.get("createdAt") or iso_utc(utc_now()),
            server_id=data.get("serverId"),
            sync_state=SyncState.SYNCED,
        )

    def to_cache(self) -> dict:
        data = asdict(self)
        data["sync_state"] = self.sync_state.value
        return data

    @classmethod
    def from_cache(cls, data: dict) -> "Goal":
        data = dict(data)
        data["sync_state"] = SyncState(data.get("sync_state", SyncState.PENDING.value))
        return cls(**data)


@dataclass
class PomodoroSession:
    date: str
    duration: int
    type: str = "work"
    sync_state: SyncState = SyncState.PENDING

    @property
    def synced(self) -> bool:
        return self.sync_state is SyncState.SYNCED

    def to_payload(self) -> dict:
        return {"date": self.date, "duration": self.duration, "type": self.type}

    @classmethod
    def from_server(cls, data: dict) -> "PomodoroSession":
        return cls(
            date=data["date"],
            duration=int(data["duration"]),
            type=data.get("type", "work"),
            sync_state=SyncState.SYNCED,
        )

    def to_cache(self) -> dict:
        return {
            "date": self.date,
            "duration": self.duration,
            "type": self.type,
            "sync_state": self.sync_state.value,
        }

    @classmethod
    def from_cache(cls, data: dict) -> "PomodoroSession":
        return cls(
            date=data["date"],
            duration=int(data["duration"]),
            type=data.get("type", "work"),
            sync_state=SyncState(data.get("sync_state", SyncState.PENDING.value)),
        )
