"""
Lead routes — list/filter, fetch, create, patch, delete. All owner-scoped.
"""
import logging
from flask import Blueprint, g, jsonify, request

from leadtracker.auth import login_required
from leadtracker.database import get_session
from leadtracker.services import lead_store
from leadtracker.validation import validate_create, validate_patch

logger = logging.getLogger('routes.leads')

bp = Blueprint('leads', __name__, url_prefix='/api/leads')

# Query keys that drive pagination rather than filtering
PAGINATION_KEYS = ('page', 'limit')


def _filter_request(args):
    """MultiDict → {key: str | [str, ...]}; repeated keys become lists."""
    filters = {}
    for key, values in args.lists():
        if key in PAGINATION_KEYS:
            continue
        filters[key] = values if len(values) > 1 else values[0]
    return filters


def _json_body():
    return request.get_json(silent=True)


@bp.route('', methods=['GET'])
@login_required
def list_leads():
    """Paginated, filtered list of the caller's leads."""
    session = get_session()
    try:
        envelope = lead_store.list_leads(
            session,
            g.principal_id,
            _filter_request(request.args),
            page=request.args.get('page'),
            limit=request.args.get('limit'),
        )
        return jsonify(envelope)
    finally:
        session.close()


@bp.route('/<lead_id>', methods=['GET'])
@login_required
def get_lead(lead_id):
    session = get_session()
    try:
        lead = lead_store.get_lead(session, g.principal_id, lead_id)
        return jsonify(lead.to_dict())
    finally:
        session.close()


@bp.route('', methods=['POST'])
@login_required
def create_lead():
    data = validate_create(_json_body())
    session = get_session()
    try:
        lead = lead_store.create_lead(session, g.principal_id, data)
        return jsonify(lead.to_dict()), 201
    finally:
        session.close()


@bp.route('/<lead_id>', methods=['PUT', 'PATCH'])
@login_required
def update_lead(lead_id):
    """Partial update — only the keys present in the body change."""
    patch = validate_patch(_json_body())
    session = get_session()
    try:
        lead = lead_store.update_lead(session, g.principal_id, lead_id, patch)
        return jsonify(lead.to_dict())
    finally:
        session.close()


@bp.route('/<lead_id>', methods=['DELETE'])
@login_required
def delete_lead(lead_id):
    session = get_session()
    try:
        lead_store.delete_lead(session, g.principal_id, lead_id)
        return jsonify({'message': 'Lead deleted successfully'})
    finally:
        session.close()
