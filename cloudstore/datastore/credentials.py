"""Service account credentials for Google Cloud Datastore.

The access layer never caches credentials itself: a provider is asked for a
fresh snapshot every time the connection is renewed.
"""

import json
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict


@dataclass(frozen=True)
class Credentials:
    """Snapshot of a service account key, as found in the JSON key file."""

    type: str
    project_id: str
    private_key_id: str
    private_key: str
    client_email: str
    client_id: str
    auth_uri: str
    token_uri: str
    auth_provider_x509_cert_url: str
    client_x509_cert_url: str

    @classmethod
    def from_info(cls, info: Dict[str, Any]) -> 'Credentials':
        """Build credentials from a parsed service account key.

        Keys that are not part of the service account format (for example
        "universe_domain") are ignored; missing ones default to "".

        Raises:
            ValueError: If the key does not name a project.
        """
        if not info.get('project_id'):
            raise ValueError("Service account key has no project_id")
        return cls(**{f.name: info.get(f.name, '') for f in fields(cls)})

    def as_info(self) -> Dict[str, str]:
        """Returns the credentials in service account key format."""
        return asdict(self)


class KeyFileCredentialsProvider:
    """Reads credentials from a service account key file.

    The file is read again on every call, so a rotated key is picked up by
    the next connection renewal.
    """

    def __init__(self, path: str):
        self.path = path

    def get_credentials(self) -> Credentials:
        """Load the key file.

        Raises:
            FileNotFoundError: If the key file does not exist
            ValueError: If the key file is not a valid service account key
        """
        with open(self.path) as fp:
            info = json.load(fp)
        return Credentials.from_info(info)


class StaticCredentialsProvider:
    """Always hands out the same credentials."""

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    def get_credentials(self) -> Credentials:
        return self._credentials
