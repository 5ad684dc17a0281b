import pytest

from namespace_backup_webhook import config

ENV_VARS = [
	"VELERO_NAMESPACE",
	"CRON_EXPRESSION",
	"CSI_SNAPSHOT_TIMEOUT",
	"STORAGE_LOCATION",
	"BACKUP_TTL",
	"DEFAULT_VOLUMES_TO_FS_BACKUP",
	"BACKUP_SUFFIX",
	"LOG_FORMAT",
	"LOG_LEVEL",
	"WEBHOOK_TIMEOUT_SECONDS",
	"PORT",
	"TLS_CERT_FILE",
	"TLS_KEY_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
	# Clear env to ensure defaults are used
	for k in ENV_VARS:
		monkeypatch.delenv(k, raising=False)


def test_defaults():
	settings = config.load()
	assert settings.velero_namespace == "velero"
	assert settings.cron_expression == "@every 1h"
	assert settings.csi_snapshot_timeout == "10m"
	assert settings.storage_location == "default"
	assert settings.backup_ttl == "720h0m0s"
	assert settings.default_volumes_to_fs_backup is True
	assert settings.backup_suffix == "backup"
	assert settings.log_format == "text"
	assert settings.log_level == "info"
	assert settings.webhook_timeout_seconds == 10
	assert settings.port == 8443
	assert settings.tls_cert_file == "/etc/admission-webhook/tls/tls.crt"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch):
	monkeypatch.setenv("VELERO_NAMESPACE", "backups")
	monkeypatch.setenv("CRON_EXPRESSION", "0 */6 * * *")
	monkeypatch.setenv("CSI_SNAPSHOT_TIMEOUT", "5m")
	monkeypatch.setenv("STORAGE_LOCATION", "s3-eu")
	monkeypatch.setenv("BACKUP_TTL", "168h0m0s")
	monkeypatch.setenv("DEFAULT_VOLUMES_TO_FS_BACKUP", "false")
	monkeypatch.setenv("BACKUP_SUFFIX", "snap")
	monkeypatch.setenv("LOG_FORMAT", "JSON")  # upper-case acceptable
	monkeypatch.setenv("LOG_LEVEL", "debug")
	monkeypatch.setenv("WEBHOOK_TIMEOUT_SECONDS", "3")

	settings = config.load()
	assert settings.velero_namespace == "backups"
	assert settings.cron_expression == "0 */6 * * *"
	assert settings.csi_snapshot_timeout == "5m"
	assert settings.storage_location == "s3-eu"
	assert settings.backup_ttl == "168h0m0s"
	assert settings.default_volumes_to_fs_backup is False
	assert settings.backup_suffix == "snap"
	assert settings.log_format == "json"
	assert settings.log_level == "debug"
	assert settings.webhook_timeout_seconds == 3


@pytest.mark.parametrize(
	"raw,expected",
	[
		("", True),
		("true", True),
		("TRUE", True),
		("false", False),
		("yes", False),
	],
)
def test_fs_backup_flag(monkeypatch: pytest.MonkeyPatch, raw, expected):
	monkeypatch.setenv("DEFAULT_VOLUMES_TO_FS_BACKUP", raw)
	assert config.load().default_volumes_to_fs_backup is expected


def test_invalid_values_fallback(monkeypatch: pytest.MonkeyPatch):
	monkeypatch.setenv("LOG_FORMAT", "xml")
	monkeypatch.setenv("WEBHOOK_TIMEOUT_SECONDS", "not-int")
	monkeypatch.setenv("BACKUP_SUFFIX", "")

	settings = config.load()
	assert settings.log_format == "text"
	assert settings.webhook_timeout_seconds == 10
	assert settings.backup_suffix == "backup"


def test_settings_are_immutable():
	settings = config.load()
	with pytest.raises(Exception):
		settings.velero_namespace = "other"  # type: ignore[misc]
