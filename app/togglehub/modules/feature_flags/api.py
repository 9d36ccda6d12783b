from __future__ import annotations

import logging

from flask import Blueprint, current_app, g, jsonify, request

from app.togglehub.config import Settings
from app.togglehub.db import db_session
from app.togglehub.errors import ClientInputError, InternalError, NotFoundError
from app.togglehub.models import Organization
from app.togglehub.modules.feature_flags.schemas import PatchFeatureFlagRequest, PostFeatureFlagRequest
from app.togglehub.modules.feature_flags.service import (
    FeatureFlagNotFound,
    approve_revision,
    create_feature_flag,
    get_feature_flag,
    list_feature_flags,
    push_revision,
    soft_delete_feature_flag,
)
from app.togglehub.rbac import COLLABORATOR, READ_ONLY, require_org_permission
from app.togglehub.schemas import parse_body
from app.togglehub.utils import get_pagination_params, parse_id

logger = logging.getLogger(__name__)

bp = Blueprint("feature_flags", __name__)


def _settings() -> Settings:
    return current_app.extensions["settings"]


def _require_id(raw: str, what: str) -> int:
    value = parse_id(raw)
    if value is None:
        raise ClientInputError(f"malformed {what} id {raw!r}")
    return value


@bp.get("/<organization_id>/feature-flags")
@require_org_permission(READ_ONLY)
def list_flags(organization: Organization):
    settings = _settings()
    page, page_size = get_pagination_params(
        request.args.get("page"),
        request.args.get("page_size"),
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
    s = db_session()
    flags = list_feature_flags(
        s,
        organization.id,
        page,
        page_size,
        timeout_seconds=settings.db_fetch_timeout_seconds,
    )
    s.commit()
    return jsonify(
        {
            "data": [f.to_dict() for f in flags],
            "page": page,
            "page_size": page_size,
            # count on this page, not the organization's total
            "total": len(flags),
        }
    )


@bp.post("/<organization_id>/feature-flags")
@require_org_permission(COLLABORATOR)
def post_flag(organization: Organization):
    req = parse_body(PostFeatureFlagRequest)
    s = db_session()
    flag = create_feature_flag(
        s,
        organization_id=organization.id,
        user_id=g.current_user_id,
        name=req.name,
        flag_type=req.type,
        default_value=req.default_value,
        rules=req.rules,
    )
    s.commit()
    logger.info("Created feature flag id=%s organization_id=%s", flag.id, organization.id)
    return jsonify(flag.to_dict()), 201


@bp.get("/<organization_id>/feature-flags/<feature_flag_id>")
@require_org_permission(READ_ONLY)
def get_flag(organization: Organization, feature_flag_id: str):
    flag_id = _require_id(feature_flag_id, "feature flag")
    flag = get_feature_flag(db_session(), organization.id, flag_id)
    if flag is None:
        raise NotFoundError(f"feature flag {flag_id} not found")
    return jsonify(flag.to_dict())


@bp.patch("/<organization_id>/feature-flags/<feature_flag_id>")
@require_org_permission(COLLABORATOR)
def patch_flag(organization: Organization, feature_flag_id: str):
    flag_id = _require_id(feature_flag_id, "feature flag")
    req = parse_body(PatchFeatureFlagRequest)
    s = db_session()
    try:
        revision = push_revision(
            s,
            organization_id=organization.id,
            feature_flag_id=flag_id,
            user_id=g.current_user_id,
            default_value=req.default_value,
            rules=req.rules,
        )
    except FeatureFlagNotFound:
        s.rollback()
        raise InternalError(f"feature flag {flag_id} not found") from None
    s.commit()
    return jsonify(revision.to_dict())


@bp.post("/<organization_id>/feature-flags/<feature_flag_id>/revisions/<revision_id>/approve")
@require_org_permission(COLLABORATOR)
def approve(organization: Organization, feature_flag_id: str, revision_id: str):
    flag_id = _require_id(feature_flag_id, "feature flag")
    rev_id = _require_id(revision_id, "revision")
    s = db_session()
    try:
        flag = approve_revision(
            s,
            organization_id=organization.id,
            feature_flag_id=flag_id,
            revision_id=rev_id,
        )
    except FeatureFlagNotFound:
        s.rollback()
        raise InternalError(f"feature flag {flag_id} not found") from None
    s.commit()
    logger.info("Approved revision id=%s feature_flag_id=%s version=%s", rev_id, flag.id, flag.version)
    return jsonify(flag.to_dict())


@bp.delete("/<organization_id>/feature-flags/<feature_flag_id>")
@require_org_permission(COLLABORATOR)
def delete_flag(organization: Organization, feature_flag_id: str):
    flag_id = _require_id(feature_flag_id, "feature flag")
    s = db_session()
    try:
        soft_delete_feature_flag(s, organization_id=organization.id, feature_flag_id=flag_id)
    except FeatureFlagNotFound:
        s.rollback()
        raise InternalError(f"feature flag {flag_id} not found") from None
    s.commit()
    logger.info("Soft deleted feature flag id=%s", flag_id)
    return "", 204
