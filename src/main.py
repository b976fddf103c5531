"""
Rue bridge pairing - Main Entry Point
Discovers a bridge and polls it until the link button is pressed, then stores the credential
"""

import asyncio
import signal
import sys
import logging
import os

from config_loader import load_config, setup_logging
from errors import PairingError
from services.pairing_service import BridgePairingService

logger = logging.getLogger(__name__)


async def main():
    """Main entry point"""

    # Get config file path from environment variable or use default
    config_path = os.environ.get('CONFIG_FILE', 'config/config.yaml')

    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"Could not load configuration {config_path}: {e}", file=sys.stderr)
        return 1

    setup_logging(config)
    logger.info(f"Using configuration file: {config_path}")

    service = BridgePairingService(config)

    if service.has_credential() and not os.environ.get('FORCE_PAIRING'):
        try:
            credential = service.load_credential()
        except PairingError as e:
            logger.warning(f"Stored credential unusable, pairing again: {e}")
        else:
            logger.info(f"Already paired with bridge {credential.bridge_address} "
                        f"(set FORCE_PAIRING=1 to pair again)")
            return 0

    # Handle graceful shutdown
    pairing_task = asyncio.create_task(service.pair())

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, stopping pairing...")
        pairing_task.cancel()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        credential = await pairing_task
    except asyncio.CancelledError:
        logger.info("Pairing cancelled")
        return 1
    except PairingError as e:
        logger.error(f"Pairing failed: {e}")
        return 1

    logger.info(f"Credential for bridge {credential.bridge_address} stored at {service.store.path}")
    return 0


if __name__ == "__main__":
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nPairing stopped by user")
        sys.exit(1)
