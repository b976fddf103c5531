"""
Storage module for the persisted bridge credential
"""

from .credential_store import CredentialStore

__all__ = ['CredentialStore']
