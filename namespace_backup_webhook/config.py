import os
from dataclasses import asdict, dataclass
from typing import Any, Literal

LogFormat = Literal["text", "json"]


def _get_env(name: str, default: str) -> str:
    val = os.getenv(name)
    return val if val is not None and val != "" else default


def _parse_int(name: str, default: int) -> int:
    val = _get_env(name, str(default))
    try:
        return int(val)
    except Exception:
        return default


def _parse_bool(name: str, default: bool = True) -> bool:
    # Unset or empty keeps the default; otherwise only "true" enables
    val = os.getenv(name)
    if val is None or val == "":
        return default
    return val.lower() == "true"


def _parse_log_format(name: str, default: LogFormat = "text") -> LogFormat:
    val = _get_env(name, default).lower()
    return val if val in ("text", "json") else default


@dataclass(frozen=True)
class Settings:
    # Velero
    velero_namespace: str = "velero"
    cron_expression: str = "@every 1h"
    csi_snapshot_timeout: str = "10m"
    storage_location: str = "default"
    backup_ttl: str = "720h0m0s"
    default_volumes_to_fs_backup: bool = True
    backup_suffix: str = "backup"

    # Logging
    log_format: LogFormat = "text"
    log_level: str = "info"

    # Server
    webhook_timeout_seconds: int = 10
    port: int = 8443
    tls_cert_file: str = "/etc/admission-webhook/tls/tls.crt"
    tls_key_file: str = "/etc/admission-webhook/tls/tls.key"

    def as_log_fields(self) -> dict[str, Any]:
        return asdict(self)


def load() -> Settings:
    return Settings(
        velero_namespace=_get_env("VELERO_NAMESPACE", "velero"),
        cron_expression=_get_env("CRON_EXPRESSION", "@every 1h"),
        csi_snapshot_timeout=_get_env("CSI_SNAPSHOT_TIMEOUT", "10m"),
        storage_location=_get_env("STORAGE_LOCATION", "default"),
        backup_ttl=_get_env("BACKUP_TTL", "720h0m0s"),
        default_volumes_to_fs_backup=_parse_bool("DEFAULT_VOLUMES_TO_FS_BACKUP", True),
        backup_suffix=_get_env("BACKUP_SUFFIX", "backup"),
        log_format=_parse_log_format("LOG_FORMAT", "text"),
        log_level=_get_env("LOG_LEVEL", "info"),
        webhook_timeout_seconds=_parse_int("WEBHOOK_TIMEOUT_SECONDS", 10),
        port=_parse_int("PORT", 8443),
        tls_cert_file=_get_env("TLS_CERT_FILE", "/etc/admission-webhook/tls/tls.crt"),
        tls_key_file=_get_env("TLS_KEY_FILE", "/etc/admission-webhook/tls/tls.key"),
    )
