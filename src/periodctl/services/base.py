"""BaseService: foundation for the period services.

Every service receives a :class:`Ledger` at construction time. The Ledger
owns the engine, the period repository and the event bus.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from periodctl.infrastructure.ledger import Ledger
    from periodctl.infrastructure.repositories.periods import PeriodRepository

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class DetectionService(BaseService):
            def detect(self, tenant_id: str, start: str, end: str) -> ServiceResult:
                existing = self._repo.find_exact(tenant_id, start, end)
                ...
    """

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger

    @property
    def _repo(self) -> PeriodRepository:
        return self._ledger.periods

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle event. No-op if no event bus is attached.

        Plugin failures are warnings, never errors.
        """
        bus = self._ledger.event_bus
        if bus is None:
            return
        try:
            bus.dispatch(hook_name, payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
