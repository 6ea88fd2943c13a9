"""
Client registry.

Keeps onboarded clients in memory, scoring each one on create and
update against the ruleset the caller passes in. Review status is
not stored; :func:`to_view` derives it whenever a client is read.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from datetime import datetime

from loguru import logger

from riskdesk.exceptions import ClientNotFoundError
from riskdesk.schemas import (
    Client,
    ClientCreate,
    ClientUpdate,
    ClientView,
    RiskBand,
    RiskConfig,
)
from riskdesk.services import review_status, risk_engine
from riskdesk.utils.dates import utcnow


def to_view(client: Client, now: datetime) -> ClientView:
    """Attach the review status of *client* as seen at *now*."""
    return ClientView(
        **client.model_dump(),
        status=review_status.derive(client.next_review, now),
    )


class ClientRegistry:
    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clients: dict[str, Client] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def _scored(self, fields: dict, config: RiskConfig, now: datetime) -> dict:
        details = ClientCreate.model_validate(fields)
        profile = details.profile()
        assessment = risk_engine.evaluate(profile, config)
        return {
            **details.model_dump(),
            "score": assessment.score,
            "band": assessment.band,
            "factors": assessment.factors,
            "next_review": review_status.next_review_date(now, assessment.next_review_months),
            "last_updated": now,
        }

    def list(self, risk_band: RiskBand | None = None, search: str | None = None) -> list[Client]:
        """Return clients, optionally filtered by band and by a name fragment."""
        with self._lock:
            clients = list(self._clients.values())
        if risk_band is not None:
            clients = [c for c in clients if c.band == risk_band]
        if search:
            needle = search.lower()
            clients = [
                c for c in clients
                if needle in c.first_name.lower() or needle in c.last_name.lower()
            ]
        return clients

    def get(self, client_id: str) -> Client:
        with self._lock:
            client = self._clients.get(client_id)
        if client is None:
            raise ClientNotFoundError(client_id)
        return client

    def create(self, data: ClientCreate, config: RiskConfig) -> Client:
        now = self._clock()
        client = Client(
            id=str(uuid.uuid4()),
            created_at=now,
            **self._scored(data.model_dump(), config, now),
        )
        with self._lock:
            self._clients[client.id] = client
        logger.info(f"Client {client.id} onboarded: score={client.score} band={client.band.value}")
        return client

    def update(self, client_id: str, changes: ClientUpdate, config: RiskConfig) -> Client:
        """Apply *changes*, then rescore and reschedule from now."""
        now = self._clock()
        with self._lock:
            existing = self._clients.get(client_id)
            if existing is None:
                raise ClientNotFoundError(client_id)
            merged = {
                **ClientCreate.model_validate(existing.model_dump()).model_dump(),
                **changes.model_dump(exclude_unset=True, exclude_none=True),
            }
            client = Client(
                id=existing.id,
                created_at=existing.created_at,
                **self._scored(merged, config, now),
            )
            self._clients[client_id] = client
        logger.info(f"Client {client_id} updated: score={client.score} band={client.band.value}")
        return client

    def reassess(self, client_id: str, config: RiskConfig) -> Client:
        """Rescore a client against *config* without changing its details."""
        return self.update(client_id, ClientUpdate(), config)

    def delete(self, client_id: str) -> None:
        with self._lock:
            if self._clients.pop(client_id, None) is None:
                raise ClientNotFoundError(client_id)
        logger.info(f"Client {client_id} deleted")
