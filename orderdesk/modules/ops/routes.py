"""
Ops Routes
==========

Public health endpoint.
"""

import time

from flask import current_app, jsonify

from . import ops_health_bp

_started_at = time.time()


def _check_document_store():
    """Reachability of the document store, as a check dict"""
    desk = current_app.extensions.get('orderdesk')
    if desk is None:
        return {'status': 'critical', 'error': 'OrderDesk not initialised'}

    store = desk.store
    if not getattr(store, 'configured', True):
        return {'status': 'critical', 'error': 'Document store not configured'}

    started = time.time()
    try:
        store.ping()
    except Exception as e:
        return {'status': 'critical', 'error': str(e)}

    return {'status': 'ok', 'latency_ms': round((time.time() - started) * 1000, 1)}


def _build_health_response():
    checks = {
        'document_store': _check_document_store(),
        'uptime': {'status': 'ok', 'seconds': int(time.time() - _started_at)},
    }
    status = 'critical' if any(c['status'] == 'critical' for c in checks.values()) else 'ok'
    return {'status': status, 'checks': checks}


@ops_health_bp.route('/')
@ops_health_bp.route('')
def health_check():
    """Health check for uptime monitors: 200 when ok, 503 when critical"""
    data = _build_health_response()
    return jsonify(data), 200 if data['status'] == 'ok' else 503
