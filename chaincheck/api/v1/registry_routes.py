"""
Registry Routes
Public reads: batches, counters, event history
"""
import logging

from flask import Blueprint, request

from chaincheck.api.middleware.response_middleware import response_middleware
from chaincheck.extensions import get_registry

registry_bp = Blueprint('registry', __name__)
logger = logging.getLogger(__name__)


@registry_bp.route('/products/<int:batch_id>', methods=['GET'])
def get_product(batch_id):
    """Batch metadata; unknown ids come back with exists=false"""
    return response_middleware.create_success_response(get_registry().get_product(batch_id).to_dict())


@registry_bp.route('/stats', methods=['GET'])
def get_statistics():
    return response_middleware.create_success_response(get_registry().get_statistics())


@registry_bp.route('/events', methods=['GET'])
def query_events():
    """
    Event history
    Query params: event (name filter), from, to (inclusive sequence numbers)
    """
    registry = get_registry()
    events = registry.query_events(
        request.args.get('event'),
        request.args.get('from', default=1, type=int),
        request.args.get('to', default=None, type=int)
    )

    return response_middleware.create_success_response({
        'events': [event.to_dict() for event in events],
        'count': len(events),
        'verification_summary': registry.events.summarize_verifications(events)
    })
