"""
Main FastAPI application setup
Local HTTP command surface for bridge discovery, pairing and credential storage
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from typing import Dict
import logging

from .bridge_routes import create_bridge_routes
from .system_routes import create_system_routes

logger = logging.getLogger(__name__)


class PairingAPI:
    """Local HTTP API exposing the pairing commands to a UI shell"""

    def __init__(self, service, config: Dict):
        self.service = service
        self.config = config
        self.app = FastAPI(
            title="Rue Bridge Pairing",
            description="Local API for bridge discovery, pairing and credential storage",
            version="0.1.0"
        )
        self._setup_middleware()
        self._setup_routes()

    def _setup_middleware(self):
        origins = self.config.get('api', {}).get('cors_origins', ['*'])
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _setup_routes(self):
        """Setup FastAPI routes using modular approach"""
        self.app.include_router(create_bridge_routes(self.service))
        self.app.include_router(create_system_routes(self.service, self.config))
        logger.debug("API routes registered")
