"""
ASGI entry point for uvicorn
This module exposes the FastAPI app for use with uvicorn command line
"""

import logging
import os

from config_loader import load_config, setup_logging
from services.pairing_service import BridgePairingService
from api.main_api import PairingAPI

# Load configuration
config = load_config(os.environ.get('CONFIG_FILE', 'config/config.yaml'))
setup_logging(config)

logger = logging.getLogger(__name__)

logger.info("Initializing application components...")

service = BridgePairingService(config)

# Create API (which contains the FastAPI app)
api = PairingAPI(service, config)

# Expose the FastAPI app for uvicorn
app = api.app

logger.info("ASGI app ready for uvicorn")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config['api']['host'], port=config['api']['port'])
