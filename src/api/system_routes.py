"""
System health API routes
"""

from fastapi import APIRouter
from datetime import datetime, timezone


def create_system_routes(service, config):
    """Create system monitoring routes"""
    router = APIRouter(prefix="/api/system", tags=["system"])

    @router.get("/health")
    async def system_health():
        """System health check"""
        return {
            "status": "healthy",
            "discovery_method": config.get('discovery', {}).get('method', 'auto'),
            "pairing": service.get_status(),
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    return router
