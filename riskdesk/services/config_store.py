"""
Risk configuration store.

Holds the single in-process ruleset snapshot. Reads hand out deep
copies so callers can never mutate the stored config; writes are
validated as a whole and serialized by a re-entrant lock, so list
helpers read-modify-write atomically (last write wins).
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import ValidationError

from riskdesk.config import DEFAULT_RISK_CONFIG
from riskdesk.exceptions import RiskConfigValidationError
from riskdesk.schemas import RiskConfig, RiskConfigUpdate
from riskdesk.utils.dates import utcnow


def _validation_details(exc: ValidationError) -> dict[str, Any]:
    return {
        "errors": [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in exc.errors()
        ]
    }


class RiskConfigStore:
    """In-memory owner of the current :class:`RiskConfig`."""

    def __init__(
        self,
        initial: RiskConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._config: RiskConfig | None = initial.model_copy(deep=True) if initial else None
        self._clock = clock
        self._lock = threading.RLock()

    def load(self) -> RiskConfig:
        """Return the current config, or the defaults when none was stored."""
        with self._lock:
            current = self._config or DEFAULT_RISK_CONFIG
            return current.model_copy(deep=True)

    def update(self, partial: RiskConfigUpdate | Mapping[str, Any]) -> RiskConfig:
        """
        Merge *partial* into the stored config.

        Top-level keys replace the stored value whole; nested objects are
        never merged field by field. Nothing is written when the merged
        result fails validation.
        """
        if not isinstance(partial, RiskConfigUpdate):
            try:
                partial = RiskConfigUpdate.model_validate(partial)
            except ValidationError as exc:
                raise RiskConfigValidationError(
                    "Invalid risk configuration update", _validation_details(exc)
                ) from exc

        changes = partial.model_dump(exclude_unset=True, exclude_none=True)

        with self._lock:
            current = self._config or DEFAULT_RISK_CONFIG
            merged = {**current.model_dump(), **changes, "updated_at": self._clock()}
            try:
                updated = RiskConfig.model_validate(merged)
            except ValidationError as exc:
                raise RiskConfigValidationError(
                    "Invalid risk configuration", _validation_details(exc)
                ) from exc
            self._config = updated

        logger.info(f"Risk config updated: {', '.join(sorted(changes)) or 'no changes'}")
        return updated.model_copy(deep=True)

    def reset(self) -> RiskConfig:
        """Restore the bootstrap defaults."""
        with self._lock:
            self._config = DEFAULT_RISK_CONFIG.model_copy(
                deep=True, update={"updated_at": self._clock()}
            )
            restored = self._config.model_copy(deep=True)
        logger.info("Risk config reset to defaults")
        return restored

    # -- List helpers --------------------------------------------------------

    def _add_entry(self, field: str, value: str) -> RiskConfig:
        value = value.strip()
        if not value:
            raise RiskConfigValidationError(f"Cannot add a blank entry to {field}", {"field": field})
        with self._lock:
            entries: list[str] = getattr(self.load(), field)
            if value in entries:
                logger.debug(f"{value!r} already in {field}, nothing to add")
                return self.load()
            return self.update({field: [*entries, value]})

    def _remove_entry(self, field: str, value: str) -> RiskConfig:
        value = value.strip()
        with self._lock:
            entries: list[str] = getattr(self.load(), field)
            if value not in entries:
                logger.debug(f"{value!r} not in {field}, nothing to remove")
                return self.load()
            return self.update({field: [entry for entry in entries if entry != value]})

    def add_high_risk_country(self, country: str) -> RiskConfig:
        return self._add_entry("high_risk_countries", country)

    def remove_high_risk_country(self, country: str) -> RiskConfig:
        return self._remove_entry("high_risk_countries", country)

    def add_high_risk_industry(self, industry: str) -> RiskConfig:
        return self._add_entry("high_risk_industries", industry)

    def remove_high_risk_industry(self, industry: str) -> RiskConfig:
        return self._remove_entry("high_risk_industries", industry)

    def add_cash_intensive_job(self, job: str) -> RiskConfig:
        return self._add_entry("cash_intensive_jobs", job)

    def remove_cash_intensive_job(self, job: str) -> RiskConfig:
        return self._remove_entry("cash_intensive_jobs", job)
