"""File-backed credential store implementing CredentialStore."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from honeyfind.core.exceptions import CredentialError


CREDENTIALS_FILE = "credentials.json"


class FileCredentialStore:
    """Stores secrets in a JSON file readable only by the current user.

    The file maps account names to secrets and is replaced atomically on
    every write, with permissions 0600.

    Attributes:
        path: Location of the credentials file.
    """

    def __init__(self, data_dir: Path) -> None:
        """Initialize the store.

        Args:
            data_dir: Directory where the credentials file is kept.
        """
        self.path = data_dir / CREDENTIALS_FILE

    def _read(self, account: str) -> dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            raise CredentialError(
                f"Cannot read credentials from {self.path}: {e}", account=account
            ) from e

        if not isinstance(data, dict):
            raise CredentialError(
                f"Credentials file {self.path} is not a JSON object", account=account
            )
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, account: str) -> str:
        """Return the secret stored for account.

        Raises:
            CredentialError: If nothing is stored or the file is unreadable.
        """
        secrets = self._read(account)
        secret = secrets.get(account)
        if not secret:
            raise CredentialError(f"No API key stored for '{account}'", account=account)
        return secret

    def set(self, account: str, secret: str) -> None:
        """Store secret for account, keeping secrets for other accounts."""
        secrets = self._read(account)
        secrets[account] = secret

        self.path.parent.mkdir(parents=True, exist_ok=True)
        # mkstemp creates the file with mode 0600
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=".credentials.", suffix=".tmp"
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(secrets, f)
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
