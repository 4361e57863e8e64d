"""Shared helpers for the thin Flask controllers."""

from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, NotFoundError
from ..evidence.photo import photo_from_data_url, photo_from_file

logger = logging.getLogger(__name__)


def error(message: str, status: int):
    return jsonify({"message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error("Silakan login terlebih dahulu", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error("Silakan login terlebih dahulu", 401)
        if session.get("role") != Role.ADMIN.value:
            return error("Anda tidak memiliki akses", 403)
        return view(*args, **kwargs)

    return wrapper


def json_errors(view):
    """Map domain errors to 4xx JSON; anything else is logged and reported as 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except AuthenticationError as e:
            return error(str(e), 401)
        except AuthorizationError as e:
            return error(str(e), 403)
        except NotFoundError as e:
            return error(str(e), 404)
        except DomainError as e:
            return error(str(e), 400)
        except Exception:
            logger.exception("unhandled error in %s %s", request.method, request.path)
            return error("Terjadi kesalahan pada server", 500)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role", Role.EMPLOYEE.value))


def form_value(name: str, default: str = "") -> str:
    """Read a field from multipart form data or a JSON body."""
    if request.form and name in request.form:
        return request.form.get(name, default)
    payload = request.get_json(silent=True) or {}
    value = payload.get(name, default)
    return default if value is None else str(value)


def request_photo(field: str = "photo", data_url_field: str = "checkInPhoto"):
    """Photo from a multipart file field, falling back to a base64 data URL."""
    photo = photo_from_file(request.files.get(field))
    if photo is None:
        photo = photo_from_data_url(form_value(data_url_field) or None)
    return photo
