"""
Service config: load from env with load_service_config().
"""
from langid.config.service import ServiceConfig, load_service_config

__all__ = [
    "ServiceConfig",
    "load_service_config",
]
