"""
In-memory credential store.

Credentials are loaded once from a JSON array of {id, name, password}
objects and appended to when a registration succeeds. Nothing is written
back to the file. Passwords are compared in plaintext.
"""
import json
import threading
from typing import Iterable, List, Optional

from pydantic import ValidationError

from login_service.auth.exceptions import CredentialSourceError, UsernameTaken
from login_service.auth.models import Credential


class CredentialStore:
    """
    Lock-guarded list of credentials.

    The list itself is never handed out; readers get copies.
    """

    def __init__(self, credentials: Optional[Iterable[Credential]] = None):
        self._lock = threading.Lock()
        self._credentials: List[Credential] = list(credentials or [])

    @classmethod
    def load(cls, source: str) -> "CredentialStore":
        """
        Load credentials from a JSON file.

        Args:
            source: Path to the credential file

        Returns:
            A populated CredentialStore

        Raises:
            CredentialSourceError: If the file is unreadable or malformed
        """
        try:
            with open(source, encoding="utf-8") as f:
                raw = json.load(f)
        except OSError as e:
            raise CredentialSourceError(f"Cannot read credential file {source}: {e}") from e
        except ValueError as e:
            raise CredentialSourceError(f"Credential file {source} is not valid JSON: {e}") from e

        if not isinstance(raw, list):
            raise CredentialSourceError(f"Credential file {source} must contain a JSON array")

        try:
            credentials = [Credential.model_validate(entry) for entry in raw]
        except ValidationError as e:
            raise CredentialSourceError(f"Credential file {source} has an invalid entry: {e}") from e
        return cls(credentials)

    def validate(self, name: str, password: str) -> bool:
        """Exact match on both name and password."""
        with self._lock:
            for credential in self._credentials:
                if credential.name == name and credential.password == password:
                    return True
        return False

    def contains(self, name: str) -> bool:
        with self._lock:
            return self._find(name) is not None

    def append(self, credential: Credential):
        """
        Add a credential whose name is not in the store yet.

        Raises:
            UsernameTaken: If a credential with the same name exists
        """
        with self._lock:
            if self._find(credential.name) is not None:
                raise UsernameTaken(credential.name)
            self._credentials.append(credential)

    def snapshot(self) -> List[Credential]:
        with self._lock:
            return [c.model_copy() for c in self._credentials]

    def __len__(self) -> int:
        with self._lock:
            return len(self._credentials)

    def _find(self, name: str) -> Optional[Credential]:
        for credential in self._credentials:
            if credential.name == name:
                return credential
        return None
