from __future__ import annotations

import uuid

from flask import Blueprint, current_app, g, jsonify, request

from app.togglehub.config import Settings
from app.togglehub.db import db_session
from app.togglehub.errors import AuthenticationError, ConflictError, NotFoundError
from app.togglehub.models import User
from app.togglehub.schemas import SignInRequest, SignUpRequest, parse_body
from app.togglehub.security import InvalidTokenError, bearer_token, create_token, verify_password, verify_token
from app.togglehub.users import EmailTakenError, create_user, find_user_by_email

bp = Blueprint("auth", __name__)


def load_current_user() -> None:
    """
    Resolves g.current_user_id from the bearer token (None when absent or invalid).
    Also assigns a simple per-request request_id (for log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    g.current_user_id = None

    token = bearer_token(request.headers.get("Authorization"))
    if not token:
        return
    settings: Settings = current_app.extensions["settings"]
    try:
        g.current_user_id = verify_token(token, settings.jwt_secret_key)
    except InvalidTokenError as e:
        current_app.logger.debug("Rejected bearer token (request_id=%s): %s", g.request_id, e)


def _auth_response(user: User) -> dict:
    settings: Settings = current_app.extensions["settings"]
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "token": create_token(user.id, settings.jwt_secret_key, settings.jwt_expire_seconds),
    }


@bp.post("/signup")
def signup():
    req = parse_body(SignUpRequest)
    s = db_session()
    try:
        user = create_user(
            s,
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
        )
    except EmailTakenError:
        raise ConflictError(f"email {req.email} already registered") from None
    s.commit()
    current_app.logger.info("Signed up user id=%s", user.id)
    return jsonify(_auth_response(user)), 201


@bp.post("/signin")
def signin():
    req = parse_body(SignInRequest)
    s = db_session()
    user = find_user_by_email(s, req.email)
    if user is None:
        raise NotFoundError(f"no user with email {req.email}")
    if not verify_password(user.password_hash, req.password):
        raise AuthenticationError(f"wrong password for user id={user.id}")
    return jsonify(_auth_response(user))
