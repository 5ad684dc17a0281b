import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from .config import Settings
from .helpers import TransitionIntent
from .resources.interface import (
    ResourceAlreadyExists,
    ResourceClient,
    ResourceError,
    ResourceNotFound,
)
from .velero import BACKUPS, SCHEDULES, build_backup, build_schedule, schedule_name

log = logging.getLogger("namespace-backup-webhook")


class DeadlineExceeded(ResourceError):
    pass


class Outcome(Enum):
    APPLIED = "applied"
    ALREADY_IN_DESIRED_STATE = "already-in-desired-state"
    BACKEND_ERROR = "backend-error"


@dataclass(frozen=True)
class StepResult:
    action: str
    kind: str
    name: str
    outcome: Outcome
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.BACKEND_ERROR


class BackupOrchestrator:
    """
    Creates and deletes the Velero schedule and instant backup for a namespace.

    Every call is safe to repeat: a schedule that already exists or is
    already gone is reported as ALREADY_IN_DESIRED_STATE. Nothing here
    raises for backend failures; they come back as BACKEND_ERROR results.
    """

    def __init__(
        self,
        settings: Settings,
        schedules: ResourceClient,
        backups: ResourceClient,
        clock: Callable[[], datetime] = datetime.now,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._schedules = schedules
        self._backups = backups
        self._clock = clock
        self._monotonic = monotonic

    def schedule_name(self, namespace: str) -> str:
        return schedule_name(namespace, self._settings.backup_suffix)

    def apply(
        self,
        intent: TransitionIntent,
        namespace: str,
        deadline: float | None = None,
    ) -> list[StepResult]:
        if intent is TransitionIntent.ACTIVATE:
            return self.activate(namespace, deadline)
        if intent is TransitionIntent.DEACTIVATE:
            return self.deactivate(namespace, deadline)
        return []

    def activate(self, namespace: str, deadline: float | None = None) -> list[StepResult]:
        schedule = build_schedule(namespace, self._settings)

        try:
            self._schedules.get(schedule.name, timeout=self._remaining(deadline))
            log.info("Velero schedule %s already exists", schedule.name)
        except ResourceNotFound as e:
            log.info("%s", e)
        except Exception as e:
            # Lookup is informational only; the create below decides
            log.info("Could not look up Velero schedule %s: %s", schedule.name, e)

        log.info("Creating Velero schedule %s", schedule.name)
        results = [
            self._create(self._schedules, SCHEDULES.kind, schedule.name, schedule.to_dict(), deadline)
        ]

        backup = build_backup(namespace, self._settings, self._clock())
        log.info("Creating Velero backup %s", backup.name)
        results.append(
            self._create(
                self._backups,
                BACKUPS.kind,
                backup.name,
                backup.to_dict(),
                deadline,
                exists_ok=False,
            )
        )
        return results

    def deactivate(self, namespace: str, deadline: float | None = None) -> list[StepResult]:
        name = self.schedule_name(namespace)
        log.info("Deleting Velero schedule %s", name)
        try:
            self._schedules.delete(name, timeout=self._remaining(deadline))
        except ResourceNotFound:
            log.info("Velero schedule %s not found; already deleted", name)
            return [StepResult("delete", SCHEDULES.kind, name, Outcome.ALREADY_IN_DESIRED_STATE)]
        except ResourceError as e:
            return [StepResult("delete", SCHEDULES.kind, name, Outcome.BACKEND_ERROR, e)]
        log.info("Velero schedule %s deleted successfully", name)
        return [StepResult("delete", SCHEDULES.kind, name, Outcome.APPLIED)]

    def _create(
        self,
        resource: ResourceClient,
        kind: str,
        name: str,
        body: dict,
        deadline: float | None,
        exists_ok: bool = True,
    ) -> StepResult:
        """Create `body`; a name clash only counts as success when `exists_ok`."""
        try:
            resource.create(body, timeout=self._remaining(deadline))
        except ResourceAlreadyExists as e:
            if not exists_ok:
                return StepResult("create", kind, name, Outcome.BACKEND_ERROR, e)
            log.info("Velero %s %s already exists", kind.lower(), name)
            return StepResult("create", kind, name, Outcome.ALREADY_IN_DESIRED_STATE)
        except ResourceError as e:
            return StepResult("create", kind, name, Outcome.BACKEND_ERROR, e)
        log.info("Velero %s %s created successfully", kind.lower(), name)
        return StepResult("create", kind, name, Outcome.APPLIED)

    def _remaining(self, deadline: float | None) -> float | None:
        """Seconds left before `deadline`; raises DeadlineExceeded once it has passed."""
        if deadline is None:
            return None
        left = deadline - self._monotonic()
        if left <= 0:
            raise DeadlineExceeded("admission deadline exceeded before calling the backend")
        return left
