"""
API module exposing the pairing commands over HTTP
"""

from .main_api import PairingAPI
from .bridge_routes import create_bridge_routes
from .system_routes import create_system_routes

__all__ = ['PairingAPI', 'create_bridge_routes', 'create_system_routes']
