import logging
import os
from typing import Any

import urllib3
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from ..config import Settings
from ..velero import BACKUPS, SCHEDULES, ResourceKind
from .interface import (
    ClusterConfigError,
    ResourceAlreadyExists,
    ResourceClient,
    ResourceError,
    ResourceNotFound,
)

log = logging.getLogger("namespace-backup-webhook")


def _translate(e: ApiException, kind: ResourceKind, name: str) -> ResourceError:
    msg = f"{kind.plural}.{kind.group} {name!r}: {e.status} {e.reason}"
    if e.status == 404:
        return ResourceNotFound(msg, status=404)
    if e.status == 409:
        return ResourceAlreadyExists(msg, status=409)
    return ResourceError(msg, status=e.status)


class KubernetesResourceClient(ResourceClient):
    def __init__(self, api: Any, kind: ResourceKind, namespace: str) -> None:
        self._api = api
        self._kind = kind
        self._namespace = namespace

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    def _call(self, method: str, subject: str, timeout: float | None, **kwargs) -> Any:
        fn = getattr(self._api, method)
        extra = {} if timeout is None else {"_request_timeout": timeout}
        try:
            return fn(
                group=self._kind.group,
                version=self._kind.version,
                namespace=self._namespace,
                plural=self._kind.plural,
                **kwargs,
                **extra,
            )
        except ApiException as e:
            raise _translate(e, self._kind, subject) from e
        except urllib3.exceptions.HTTPError as e:
            raise ResourceError(f"{self._kind.plural}.{self._kind.group} {subject!r}: {e}") from e

    def get(self, name: str, timeout: float | None = None) -> dict[str, Any]:
        return self._call("get_namespaced_custom_object", name, timeout, name=name)

    def create(self, body: dict[str, Any], timeout: float | None = None) -> dict[str, Any]:
        name = body.get("metadata", {}).get("name", "")
        return self._call("create_namespaced_custom_object", name, timeout, body=body)

    def delete(self, name: str, timeout: float | None = None) -> None:
        self._call("delete_namespaced_custom_object", name, timeout, name=name)


def load_resource_clients(
    settings: Settings,
) -> tuple[KubernetesResourceClient, KubernetesResourceClient]:
    """Return (schedules, backups) clients scoped to the Velero namespace."""
    try:
        try:
            config.load_incluster_config()
        except config.ConfigException:
            if not os.getenv("KUBECONFIG"):
                raise
            log.debug("Not running in-cluster; loading KUBECONFIG")
            config.load_kube_config()
        api = client.CustomObjectsApi()
    except Exception as e:
        raise ClusterConfigError(f"Could not get cluster config: {e}") from e

    return (
        KubernetesResourceClient(api, SCHEDULES, settings.velero_namespace),
        KubernetesResourceClient(api, BACKUPS, settings.velero_namespace),
    )
