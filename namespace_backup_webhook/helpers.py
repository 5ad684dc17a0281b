import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from .models import CREATE, DELETE, UPDATE

log = logging.getLogger("namespace-backup-webhook")

TARGET_LABEL = "namespace.oam.dev/target"
RUNTIME_LABEL = "usage.oam.dev/runtime"
RUNTIME_TARGET_VALUE = "target"


@dataclass(frozen=True)
class TargetState:
    is_target: bool
    name: str = ""


class TransitionIntent(Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    NOOP = "noop"


def evaluate_target(labels: Mapping[str, str] | None, name: str = "") -> TargetState:
    """
    A namespace is a backup target when it carries a non-empty
    `namespace.oam.dev/target` label and `usage.oam.dev/runtime: target`.
    Values are compared exactly: no trimming, no case folding.
    """
    labels = labels or {}
    target = labels.get(TARGET_LABEL, "")
    runtime = labels.get(RUNTIME_LABEL)
    return TargetState(
        is_target=target != "" and runtime == RUNTIME_TARGET_VALUE,
        name=name,
    )


def decide_transition(
    operation: str,
    old: TargetState | None,
    new: TargetState | None,
) -> TransitionIntent:
    """Edge-detect the target predicate across one admission operation."""
    was_target = old is not None and old.is_target
    is_target = new is not None and new.is_target

    if operation == CREATE:
        return TransitionIntent.ACTIVATE if is_target else TransitionIntent.NOOP

    if operation == UPDATE:
        if is_target and not was_target:
            return TransitionIntent.ACTIVATE
        if was_target and not is_target:
            return TransitionIntent.DEACTIVATE
        return TransitionIntent.NOOP

    if operation == DELETE:
        return TransitionIntent.DEACTIVATE if was_target else TransitionIntent.NOOP

    log.info("Unknown operation %r; nothing to do", operation)
    return TransitionIntent.NOOP


def make_admission_response(uid: str, allowed: bool = True) -> dict[str, Any]:
    """Return the AdmissionReview the webhook sends back to the API server."""
    return {
        "apiVersion": "admission.k8s.io/v1",
        "kind": "AdmissionReview",
        "response": {"uid": uid, "allowed": allowed},
    }


def discard_orchestration_failures(results: Iterable[Any]) -> int:
    """
    Log backend errors from the orchestrator and drop them.

    The admission decision never depends on the backup system, so this is
    the one place where orchestration failures end. Returns how many were
    discarded.
    """
    discarded = 0
    for result in results:
        if not result.failed:
            continue
        discarded += 1
        log.error(
            "Ignoring failed %s of %s %s: %s",
            result.action,
            result.kind,
            result.name,
            result.error,
        )
    return discarded
