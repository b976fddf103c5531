"""
Configuration loader for the Rue bridge pairing client
Loads and validates configuration from YAML files
"""

import yaml
import logging
from typing import Dict, Any
from pathlib import Path
from datetime import datetime
import pytz

logger = logging.getLogger(__name__)

DISCOVERY_METHODS = ('mdns', 'directory', 'auto')

# Handlers added by setup_logging, replaced on the next call
_installed_handlers = []


def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """
    Load configuration from YAML file with validation
    """
    try:
        config_file = Path(config_path)
        if not config_file.exists():
            logger.error(f"Configuration file not found: {config_path}")
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}

        # Validate required sections
        _validate_config(config)

        # Apply defaults
        config = _apply_defaults(config)

        logger.info(f"Configuration loaded from {config_path}")
        return config

    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise


def _validate_config(config: Dict) -> None:
    """Validate that required configuration sections exist"""
    required_sections = ['discovery', 'pairing']

    for section in required_sections:
        if section not in config or config[section] is None:
            raise ValueError(f"Missing required configuration section: {section}")

    # Validate discovery section
    method = config['discovery'].get('method', 'auto')
    if method not in DISCOVERY_METHODS:
        raise ValueError(f"discovery.method must be one of {', '.join(DISCOVERY_METHODS)}, got: {method}")

    # Validate pairing section
    pairing = config['pairing']
    max_rounds = pairing.get('max_rounds', 24)
    if not isinstance(max_rounds, int) or max_rounds <= 0:
        raise ValueError("pairing.max_rounds must be a positive integer")

    retry_delay = pairing.get('retry_delay_seconds', 5)
    if not isinstance(retry_delay, (int, float)) or retry_delay < 0:
        raise ValueError("pairing.retry_delay_seconds must not be negative")

    if 'directory_url' in config['discovery']:
        _validate_directory_ssl(config['discovery'])


def _validate_directory_ssl(discovery_config: Dict) -> None:
    """Validate SSL settings for the directory lookup endpoint"""
    directory_url = discovery_config.get('directory_url', '')
    ssl_verify = discovery_config.get('ssl_verify', True)

    if not directory_url.startswith('https://'):
        logger.warning("discovery.directory_url does not use https:// - lookup traffic is unencrypted")

    if not ssl_verify:
        logger.warning("discovery.ssl_verify is false - directory certificates will not be checked")

    ca_cert_path = discovery_config.get('ca_cert_path')
    if ssl_verify and ca_cert_path and not Path(ca_cert_path).exists():
        logger.warning(f"SSL CA certificate not found: {ca_cert_path}")


def _apply_defaults(config: Dict) -> Dict:
    """Apply default values to configuration"""

    # Discovery defaults
    discovery_defaults = {
        'method': 'auto',
        'directory_url': 'https://discovery.meethue.com/',
        'mdns_service': '_hue._tcp.local.',
        'mdns_timeout': 3,
        'request_timeout': 10,
        'ssl_verify': True,
        'ca_cert_path': None
    }
    for key, default_value in discovery_defaults.items():
        if key not in config['discovery']:
            config['discovery'][key] = default_value

    # Pairing defaults
    pairing_defaults = {
        'devicetype': 'rue_pc_app',
        'max_rounds': 24,
        'retry_delay_seconds': 5,
        'request_timeout': 4,
        'cancel_stragglers': True
    }
    for key, default_value in pairing_defaults.items():
        if key not in config['pairing']:
            config['pairing'][key] = default_value

    # Storage defaults
    if 'storage' not in config or config['storage'] is None:
        config['storage'] = {}
    storage_defaults = {
        'home': None,  # None resolves to the user's home directory
        'config_dir': '.config/rue',
        'config_name': 'rue.json'
    }
    for key, default_value in storage_defaults.items():
        if key not in config['storage']:
            config['storage'][key] = default_value

    # API defaults
    if 'api' not in config or config['api'] is None:
        config['api'] = {}
    api_defaults = {
        'host': '127.0.0.1',
        'port': 8000,
        'cors_origins': ['*']
    }
    for key, default_value in api_defaults.items():
        if key not in config['api']:
            config['api'][key] = default_value

    # Logging defaults
    if 'logging' not in config or config['logging'] is None:
        config['logging'] = {}
    logging_defaults = {
        'level': 'INFO',
        'file': None,
        'console_output': True,
        'timezone': 'UTC'
    }
    for key, default_value in logging_defaults.items():
        if key not in config['logging']:
            config['logging'][key] = default_value

    return config


def get_discovery_ssl_config(discovery: Dict) -> Dict[str, Any]:
    """Get SSL configuration for the directory lookup connection from the discovery section"""
    return {
        'ssl_verify': discovery.get('ssl_verify', True),
        'ca_cert_path': discovery.get('ca_cert_path'),
        'timeout_seconds': discovery.get('request_timeout', 10)
    }


class TimezoneFormatter(logging.Formatter):
    """Formatter that renders timestamps in a configured timezone"""

    def __init__(self, fmt=None, timezone_name: str = 'UTC'):
        super().__init__(fmt)
        self.tz = pytz.timezone(timezone_name)

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=self.tz)
        if datefmt:
            return dt.strftime(datefmt)
        # Default format: YYYY-MM-DD HH:MM:SS TZ
        return dt.strftime('%Y-%m-%d %H:%M:%S %Z')


def setup_logging(config: Dict) -> None:
    """Setup logging based on configuration"""
    log_config = config.get('logging', {})
    level = log_config.get('level', 'INFO')
    timezone_name = log_config.get('timezone', 'UTC')

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    formatter = TimezoneFormatter(log_format, timezone_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Replace handlers from a previous call so repeated setup does not duplicate output
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()

    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    log_file = log_config.get('file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    logger.info(f"Logging configured: level={level}, timezone={timezone_name}, "
                f"console={log_config.get('console_output', True)}, file={log_file}")


def get_sample_config() -> Dict:
    """Return a sample configuration for reference"""
    return {
        "discovery": {
            "method": "auto",                                 # mdns, directory or auto
            "directory_url": "https://discovery.meethue.com/",
            "mdns_service": "_hue._tcp.local.",
            "mdns_timeout": 3,
            "request_timeout": 10,
            "ssl_verify": True,
            "ca_cert_path": None
        },
        "pairing": {
            "devicetype": "rue_pc_app",
            "max_rounds": 24,
            "retry_delay_seconds": 5,
            "request_timeout": 4,
            "cancel_stragglers": True
        },
        "storage": {
            "home": None,
            "config_dir": ".config/rue",
            "config_name": "rue.json"
        },
        "api": {
            "host": "127.0.0.1",
            "port": 8000,
            "cors_origins": ["*"]
        },
        "logging": {
            "level": "INFO",
            "file": None,
            "console_output": True,
            "timezone": "UTC"
        }
    }
