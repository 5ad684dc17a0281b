"""
Minimal models for the Kubernetes AdmissionReview and Namespace used by this webhook.
Only the fields we need are parsed and unknown fields are ignored so that
new Kubernetes fields don't break this app.

A namespace object that the operation requires (`object` for CREATE/UPDATE,
`oldObject` for UPDATE/DELETE) and that cannot be decoded raises
AdmissionRequestError; it is never read as a namespace without labels.

References:
- AdmissionReview request/response shape:
  https://kubernetes.io/docs/reference/access-authn-authz/extensible-admission-controllers/#request-and-response
- Namespace (core/v1) API reference:
  https://kubernetes.io/docs/reference/generated/kubernetes-api/latest/#namespace-v1-core
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional

CREATE = "CREATE"
UPDATE = "UPDATE"
DELETE = "DELETE"

# Which side of the review each operation must be able to decode
_NEEDS_OBJECT = (CREATE, UPDATE)
_NEEDS_OLD_OBJECT = (UPDATE, DELETE)


class AdmissionRequestError(ValueError):
    """The review body or a namespace inside it could not be understood."""


@dataclass(frozen=True)
class NamespaceModel:
    name: str
    labels: dict[str, str] = field(default_factory=dict)

    @staticmethod
    def from_dict(d: Any) -> "NamespaceModel":
        if not isinstance(d, dict):
            raise AdmissionRequestError("namespace object is missing")
        meta = d.get("metadata")
        if meta is None:
            meta = {}
        if not isinstance(meta, dict):
            raise AdmissionRequestError("namespace metadata must be an object")

        name = meta.get("name") or ""
        if not isinstance(name, str):
            raise AdmissionRequestError("namespace name must be a string")
        if not name:
            raise AdmissionRequestError("namespace name is empty")

        labels = meta.get("labels") or {}
        if not isinstance(labels, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in labels.items()
        ):
            raise AdmissionRequestError("namespace labels must map strings to strings")

        return NamespaceModel(name=name, labels=dict(labels))


@dataclass
class AdmissionRequestModel:
    uid: str
    operation: str
    obj: NamespaceModel | None = None
    old_obj: NamespaceModel | None = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "AdmissionRequestModel":
        uid = str(d.get("uid", ""))
        op = str(d.get("operation", ""))

        obj = None
        if op in _NEEDS_OBJECT:
            try:
                obj = NamespaceModel.from_dict(d.get("object"))
            except AdmissionRequestError as e:
                raise AdmissionRequestError(f"could not parse namespace: {e}") from e

        old_obj = None
        if op in _NEEDS_OLD_OBJECT:
            try:
                old_obj = NamespaceModel.from_dict(d.get("oldObject"))
            except AdmissionRequestError as e:
                raise AdmissionRequestError(f"could not parse old namespace: {e}") from e

        return AdmissionRequestModel(uid=uid, operation=op, obj=obj, old_obj=old_obj)

    @property
    def namespace_name(self) -> str:
        """The namespace the operation is about: the new object unless it's gone."""
        if self.obj is not None:
            return self.obj.name
        if self.old_obj is not None:
            return self.old_obj.name
        return ""


@dataclass
class AdmissionReviewModel:
    request: AdmissionRequestModel

    @staticmethod
    def from_dict(d: Any) -> "AdmissionReviewModel":
        if not isinstance(d, dict):
            raise AdmissionRequestError("admission review must be a JSON object")
        req_raw = d.get("request")
        if not isinstance(req_raw, dict):
            raise AdmissionRequestError("admission request is empty")
        return AdmissionReviewModel(request=AdmissionRequestModel.from_dict(req_raw))


def parse_review(content_type: Optional[str], body: bytes) -> AdmissionReviewModel:
    """Decode a raw /validate request into the normalized review."""
    if content_type != "application/json":
        raise AdmissionRequestError(
            f'Content-Type: "{content_type or ""}" should be "application/json"'
        )
    if not body:
        raise AdmissionRequestError("admission request body is empty")
    try:
        raw = json.loads(body)
    except ValueError as e:
        raise AdmissionRequestError(f"failed to parse admission request: {e}") from e
    return AdmissionReviewModel.from_dict(raw)
