"""
Middleware modules for the GroupTherapy backend.
"""
from grouptherapy.middleware.cache_control import NoCacheMiddleware
from grouptherapy.middleware.correlation import CorrelationIdMiddleware, get_correlation_id, correlation_id_filter

__all__ = ["NoCacheMiddleware", "CorrelationIdMiddleware", "get_correlation_id", "correlation_id_filter"]
