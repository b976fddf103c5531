"""
JSON file store for the bridge credential
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from errors import PersistenceError
from pairing.models import Credential

logger = logging.getLogger(__name__)


class CredentialStore:
    """Persists one credential as JSON at <home>/<config_dir>/<config_name>

    Saving overwrites the previous file; there is no merge or versioning.
    """

    def __init__(self, home: Optional[Union[str, Path]] = None,
                 config_dir: str = ".config/rue", config_name: str = "rue.json"):
        self.home = Path(home) if home else Path.home()
        self.config_dir = config_dir
        self.config_name = config_name

    @classmethod
    def from_config(cls, config: Dict) -> "CredentialStore":
        storage = config.get('storage', {})
        return cls(
            home=storage.get('home'),
            config_dir=storage.get('config_dir', '.config/rue'),
            config_name=storage.get('config_name', 'rue.json'),
        )

    @property
    def directory(self) -> Path:
        return self.home / self.config_dir

    @property
    def path(self) -> Path:
        return self.directory / self.config_name

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, credential: Credential) -> None:
        """Write the credential, creating the config directory when absent"""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump(credential.to_dict(), f)
        except OSError as e:
            logger.error(f"Failed to save credential to {self.path}: {e}")
            raise PersistenceError(str(e)) from e

        logger.info(f"Credential for bridge {credential.bridge_address} saved to {self.path}")

    def load(self) -> Credential:
        """Read the stored credential"""
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except OSError as e:
            logger.debug(f"Failed to read credential from {self.path}: {e}")
            raise PersistenceError(str(e)) from e
        except ValueError as e:
            logger.error(f"Credential file {self.path} is not valid JSON: {e}")
            raise PersistenceError(f"Credential file is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceError(f"Credential file {self.path} does not contain an object")

        try:
            return Credential.from_dict(data)
        except ValueError as e:
            raise PersistenceError(f"Credential file {self.path} is incomplete: {e}") from e
