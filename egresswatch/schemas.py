"""Core data models."""

from datetime import date, datetime, timezone
from typing import NamedTuple, Optional, Set
from pydantic import BaseModel, Field, field_validator


class ClientIdentity(BaseModel):
    """Workload that originated the traffic."""
    name: str = Field(..., description="Workload name")
    namespace: str = Field(..., description="Kubernetes namespace")
    kind: Optional[str] = Field(None, description="Pod owner kind (Deployment, StatefulSet, ...)")

class ExternalTrafficIntent(BaseModel):
    """One observation of a client resolving an external DNS name."""
    client: ClientIdentity
    dns_name: str = Field(..., description="Destination DNS name")
    ips: Set[str] = Field(default_factory=set, description="IP literals the name resolved to")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("observed_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def observed_date(self) -> date:
        return self.observed_at.date()

class DedupKey(NamedTuple):
    """Logical identity of a client -> destination relationship."""
    client_name: str
    client_namespace: str
    client_kind: str
    dns_name: str


def dedup_key(intent: ExternalTrafficIntent) -> DedupKey:
    """Build the key used for both existence checks and writes."""
    return DedupKey(
        client_name=intent.client.name,
        client_namespace=intent.client.namespace,
        client_kind=intent.client.kind or "",
        dns_name=intent.dns_name,
    )


class IntentRecord(BaseModel):
    """Persisted relationship row."""
    id: Optional[int] = None
    client_name: str
    client_namespace: str
    client_kind: str = ""
    dns_name: str
    last_seen: date

    @property
    def key(self) -> DedupKey:
        return DedupKey(self.client_name, self.client_namespace, self.client_kind, self.dns_name)

class NotificationPayload(BaseModel):
    """Entry of the `intents` list sent with a dispatch event."""
    client_name: str
    client_namespace: str
    client_kind: str = ""
    dns_name: str

    @classmethod
    def from_key(cls, key: DedupKey) -> "NotificationPayload":
        return cls(**key._asdict())
