from typing import Any

import pytest

from namespace_backup_webhook.config import Settings
from namespace_backup_webhook.resources.interface import (
	ResourceAlreadyExists,
	ResourceClient,
	ResourceNotFound,
)


class FakeResourceClient(ResourceClient):
	"""In-memory stand-in for one namespaced resource kind."""

	def __init__(self, kind: str) -> None:
		self.kind = kind
		self.objects: dict[str, dict[str, Any]] = {}
		self.calls: list[tuple[str, str]] = []
		self.timeouts: list[float | None] = []
		self.fail_with: Exception | None = None

	def _record(self, op: str, name: str, timeout: float | None) -> None:
		self.calls.append((op, name))
		self.timeouts.append(timeout)
		if self.fail_with is not None:
			raise self.fail_with

	def get(self, name, timeout=None):
		self._record("get", name, timeout)
		if name not in self.objects:
			raise ResourceNotFound(f"{self.kind} {name!r} not found", status=404)
		return self.objects[name]

	def create(self, body, timeout=None):
		name = body["metadata"]["name"]
		self._record("create", name, timeout)
		if name in self.objects:
			raise ResourceAlreadyExists(f"{self.kind} {name!r} already exists", status=409)
		self.objects[name] = body
		return body

	def delete(self, name, timeout=None):
		self._record("delete", name, timeout)
		if name not in self.objects:
			raise ResourceNotFound(f"{self.kind} {name!r} not found", status=404)
		del self.objects[name]

	def ops(self, op: str) -> list[str]:
		return [name for o, name in self.calls if o == op]

	@property
	def mutations(self) -> list[tuple[str, str]]:
		return [c for c in self.calls if c[0] != "get"]


@pytest.fixture
def settings() -> Settings:
	return Settings()


@pytest.fixture
def schedules() -> FakeResourceClient:
	return FakeResourceClient("Schedule")


@pytest.fixture
def backups() -> FakeResourceClient:
	return FakeResourceClient("Backup")
