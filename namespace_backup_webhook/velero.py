"""
Typed builders for the two Velero resources this webhook manages.

The untyped document shape only exists in `to_dict()`; everything upstream
works with the dataclasses below.

References:
- https://velero.io/docs/main/api-types/schedule/
- https://velero.io/docs/main/api-types/backup/
"""

import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .config import Settings

API_VERSION = "velero.io/v1"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


@dataclass(frozen=True)
class ResourceKind:
    group: str
    version: str
    plural: str
    kind: str


SCHEDULES = ResourceKind("velero.io", "v1", "schedules", "Schedule")
BACKUPS = ResourceKind("velero.io", "v1", "backups", "Backup")


def schedule_name(namespace: str, suffix: str = "backup") -> str:
    return f"{namespace}-{suffix}"


def backup_name(schedule: str, now: datetime, token: str | None = None) -> str:
    """`<schedule>-<timestamp>-<token>`; the random token keeps same-second backups apart."""
    if token is None:
        token = secrets.token_hex(3)
    return f"{schedule}-{now.strftime(TIMESTAMP_FORMAT)}-{token}"


@dataclass(frozen=True)
class BackupTemplate:
    included_namespaces: tuple[str, ...]
    csi_snapshot_timeout: str
    storage_location: str
    ttl: str
    default_volumes_to_fs_backup: bool

    @staticmethod
    def for_namespace(namespace: str, settings: Settings) -> "BackupTemplate":
        return BackupTemplate(
            included_namespaces=(namespace,),
            csi_snapshot_timeout=settings.csi_snapshot_timeout,
            storage_location=settings.storage_location,
            ttl=settings.backup_ttl,
            default_volumes_to_fs_backup=settings.default_volumes_to_fs_backup,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "csiSnapshotTimeout": self.csi_snapshot_timeout,
            "includedNamespaces": list(self.included_namespaces),
            "storageLocation": self.storage_location,
            "ttl": self.ttl,
            "defaultVolumesToFsBackup": self.default_volumes_to_fs_backup,
        }


@dataclass(frozen=True)
class ScheduleSpec:
    name: str
    namespace: str
    schedule: str
    template: BackupTemplate
    use_owner_references_in_backup: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": API_VERSION,
            "kind": SCHEDULES.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": {
                "schedule": self.schedule,
                "useOwnerReferencesInBackup": self.use_owner_references_in_backup,
                "template": self.template.to_dict(),
            },
        }


@dataclass(frozen=True)
class BackupSpec:
    name: str
    namespace: str
    template: BackupTemplate

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": API_VERSION,
            "kind": BACKUPS.kind,
            "metadata": {"name": self.name, "namespace": self.namespace},
            "spec": self.template.to_dict(),
        }


def build_schedule(namespace: str, settings: Settings) -> ScheduleSpec:
    """Recurring schedule backing up `namespace`, stored in the Velero namespace."""
    return ScheduleSpec(
        name=schedule_name(namespace, settings.backup_suffix),
        namespace=settings.velero_namespace,
        schedule=settings.cron_expression,
        template=BackupTemplate.for_namespace(namespace, settings),
    )


def build_backup(
    namespace: str,
    settings: Settings,
    now: datetime,
    token: str | None = None,
) -> BackupSpec:
    """One-shot backup of `namespace`; every call gets a distinct name."""
    return BackupSpec(
        name=backup_name(schedule_name(namespace, settings.backup_suffix), now, token),
        namespace=settings.velero_namespace,
        template=BackupTemplate.for_namespace(namespace, settings),
    )
