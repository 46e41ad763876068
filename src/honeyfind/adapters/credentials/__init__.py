"""Credential store adapters."""

from honeyfind.adapters.credentials.file_store import FileCredentialStore


__all__ = ["FileCredentialStore"]
