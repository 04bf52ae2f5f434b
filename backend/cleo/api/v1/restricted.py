"""Role-gated sample resources."""

from __future__ import annotations

from flask import Blueprint

from cleo.api.deps import current_identity, json_response, require_auth, require_roles, timing
from cleo.models.user import Role

bp = Blueprint("restricted", __name__)


@bp.get("/admin/secret")
@require_auth
@require_roles(Role.ADMIN.value)
@timing
def admin_secret():
    identity = current_identity()
    return json_response({"data": {"message": "admin only", "user_id": identity.id}})


@bp.get("/worker/secret")
@require_auth
@require_roles(Role.WORKER.value, Role.ADMIN.value)
@timing
def worker_secret():
    identity = current_identity()
    return json_response({"data": {"message": "workers and admins", "user_id": identity.id}})
