# monitoring/metrics.py
import time

from flask import Flask, Response, g, request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Registry metrics
PRODUCTS_REGISTERED = Counter('chaincheck_products_registered_total', 'Product batches registered')
VERIFICATIONS = Counter('chaincheck_verifications_total', 'Verification attempts', ['outcome'])
EVENTS_EMITTED = Counter('chaincheck_events_total', 'Registry events emitted', ['event'])

# HTTP metrics
REQUEST_COUNT = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
REQUEST_DURATION = Histogram('http_request_duration_seconds', 'HTTP request duration')


def init_app(app: Flask):
    """Attach request metrics and the /metrics endpoint"""

    @app.before_request
    def _start_timer():
        g.metrics_start = time.time()

    @app.after_request
    def _record_request(response):
        start = g.pop('metrics_start', None)
        if start is not None:
            REQUEST_DURATION.observe(time.time() - start)
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=request.endpoint or 'unknown',
            status=response.status_code
        ).inc()
        return response

    @app.route('/metrics')
    def metrics():
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
