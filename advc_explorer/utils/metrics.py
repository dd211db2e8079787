"""Prometheus metrics for the explorer engine."""

from prometheus_client import Counter, Histogram, generate_latest
from fastapi import FastAPI, Response


class Metrics:
    """Prometheus metrics collection."""
    
    def __init__(self):
        # Source metrics
        self.source_lookups = Counter(
            'explorer_source_lookups_total',
            'Data source lookups by outcome (found, empty, unavailable)',
            ['source', 'outcome']
        )
        
        self.price_cache = Counter(
            'explorer_price_cache_total',
            'Price cache results (hit, refresh, stale, default)',
            ['result']
        )
        
        # Request metrics
        self.request_count = Counter(
            'explorer_requests_total',
            'Total number of API requests',
            ['method', 'endpoint', 'status']
        )
        
        self.request_duration = Histogram(
            'explorer_request_duration_seconds',
            'Request duration in seconds',
            ['method', 'endpoint']
        )


# Global metrics instance
metrics = Metrics()


def setup_metrics(app: FastAPI):
    """Setup metrics endpoint."""
    
    @app.get("/metrics", include_in_schema=False)
    async def get_metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type="text/plain"
        )
