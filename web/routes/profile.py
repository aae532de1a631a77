"""Profile endpoint: authenticate the caller and return user + profile."""

import structlog
from quart import Blueprint, jsonify, request
from config.constants import PROFILE_METHODS, REDACTED_DETAILS, SERVER_ERROR_MESSAGE
from config.settings import settings
from storage.database import ensure_schema, get_pool
from storage.repositories.profile_repo import ProfileRepository
from storage.repositories.user_repo import UserRepository
from utils.formatting import serialize_row
from web.auth import AuthError, resolve_user

log = structlog.get_logger(__name__)

profile_bp = Blueprint("profile", __name__)


@profile_bp.route("/profile", methods=PROFILE_METHODS, provide_automatic_options=False)
async def get_profile():
    try:
        pool = await get_pool()
        await ensure_schema(pool)

        user = await resolve_user(request.headers, UserRepository(pool))
        profile = await ProfileRepository(pool).get_for_user(user["id"])

        return jsonify({
            "user": serialize_row(user),
            "profile": serialize_row(profile),
            "profile_type": profile.get("profile_type") if profile else None,
        }), 200
    except AuthError as e:
        return jsonify({"error": e.message}), 401
    except Exception as e:
        log.exception("profile_request_failed", error=str(e))
        # Message-less errors (e.g. TimeoutError()) fall back to the type name
        details = (str(e) or type(e).__name__) if settings.expose_error_details else REDACTED_DETAILS
        return jsonify({"error": SERVER_ERROR_MESSAGE, "details": details}), 500
