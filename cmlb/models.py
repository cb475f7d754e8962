"""Records read from and written to Firestore by the dinner suggestion job."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class NotificationSettings:
    """Singleton document settings/notifications."""
    enabled: bool = False
    hour: Optional[int] = None  # 0-23 in the configured time zone
    last_sent: Optional[str] = None  # YYYY-MM-DD

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotificationSettings":
        return cls(
            enabled=bool(data.get('enabled', False)),
            hour=_coerce_hour(data.get('hour')),
            last_sent=data.get('lastSent') or None,
        )


@dataclass
class RegisteredDevice:
    """A browser registered for push, one document per user in fcm_tokens."""
    id: str
    token: Optional[str] = None
    owner: Optional[str] = None
    updated_at: Any = None

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> "RegisteredDevice":
        return cls(
            id=doc_id,
            token=data.get('token') or None,
            owner=data.get('email') or data.get('owner'),
            updated_at=data.get('updatedAt'),
        )


@dataclass
class RecipeRecord:
    id: str
    title: str = ''
    rating: Optional[float] = None
    favorite: bool = False
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, doc_id: str, data: Dict[str, Any]) -> "RecipeRecord":
        rating = data.get('rating')
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            rating = None
        tags = data.get('tags') or []
        if isinstance(tags, str):
            tags = [tags]
        elif not isinstance(tags, (list, tuple)):
            tags = []
        return cls(
            id=doc_id,
            title=str(data.get('title') or ''),
            rating=rating,
            favorite=bool(data.get('favorite', False)),
            tags=[str(tag) for tag in tags],
        )


@dataclass
class DeliveryResult:
    """Outcome of one token in a multicast push."""
    token: str
    success: bool
    error_code: Optional[str] = None


@dataclass
class JobOutcome:
    status: str  # 'skipped' or 'sent'
    reason: Optional[str] = None
    date: Optional[str] = None
    suggestion: Optional[str] = None
    success_count: int = 0
    failure_count: int = 0
    removed_devices: int = 0

    @classmethod
    def skipped(cls, reason: str, date: Optional[str] = None) -> "JobOutcome":
        return cls(status='skipped', reason=reason, date=date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status,
            'reason': self.reason,
            'date': self.date,
            'suggestion': self.suggestion,
            'success_count': self.success_count,
            'failure_count': self.failure_count,
            'removed_devices': self.removed_devices,
        }


def _coerce_hour(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
