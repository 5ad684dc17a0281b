import logging
import time
from typing import Callable

from flask import Blueprint, jsonify, request

from .config import Settings
from .helpers import (
    TransitionIntent,
    decide_transition,
    discard_orchestration_failures,
    evaluate_target,
    make_admission_response,
)
from .models import AdmissionRequestError, parse_review
from .orchestrator import BackupOrchestrator
from .resources.interface import ClusterConfigError, ResourceClient

log = logging.getLogger("namespace-backup-webhook")

ClientFactory = Callable[[Settings], tuple[ResourceClient, ResourceClient]]

_PAST_TENSE = {"CREATE": "created", "UPDATE": "updated", "DELETE": "deleted"}


def _plain(message: str, status: int):
    return message + "\n", status, {"Content-Type": "text/plain; charset=utf-8"}


def create_routes(settings: Settings, client_factory: ClientFactory):
    bp = Blueprint("webhook", __name__)

    @bp.route("/health", methods=["GET"])
    def health():
        log.debug("Healthy", extra={"uri": request.path})
        return "ok", 200, {"Content-Type": "text/plain; charset=utf-8"}

    @bp.route("/validate", methods=["POST"])
    def validate():
        """
        Validating webhook: create or delete Velero resources when a namespace
        becomes or stops being a backup target. Always allows the operation.
        """
        deadline = time.monotonic() + settings.webhook_timeout_seconds

        try:
            review = parse_review(request.mimetype, request.get_data(cache=False))
        except AdmissionRequestError as e:
            log.error("Failed to parse request: %s", e, extra={"uri": request.path})
            return _plain(str(e), 400)

        req = review.request
        uid = req.uid
        ns = req.namespace_name
        log.info("Namespace %s %s", ns, _PAST_TENSE.get(req.operation, req.operation), extra={"uid": uid})

        old = evaluate_target(req.old_obj.labels, req.old_obj.name) if req.old_obj else None
        new = evaluate_target(req.obj.labels, req.obj.name) if req.obj else None
        intent = decide_transition(req.operation, old, new)
        log.info(
            "Decision: ns=%s operation=%s old=%s new=%s -> %s",
            ns,
            req.operation,
            old.is_target if old else None,
            new.is_target if new else None,
            intent.value,
        )

        if intent is TransitionIntent.NOOP:
            return jsonify(make_admission_response(uid, True))

        try:
            schedules, backups = client_factory(settings)
        except ClusterConfigError as e:
            log.error("Failed to create client: %s", e)
            return _plain(str(e), 500)

        try:
            orchestrator = BackupOrchestrator(settings, schedules, backups)
            results = orchestrator.apply(intent, ns, deadline=deadline)
            discard_orchestration_failures(results)
        except Exception:
            log.error("Error orchestrating Velero resources for %s", ns, exc_info=True)

        return jsonify(make_admission_response(uid, True))

    return bp
