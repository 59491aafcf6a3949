"""Connection management for Google Cloud Datastore.

A ConnectionManager owns the single live datastore.Client.  Renewing the
connection builds a brand new client and swaps the reference; the old client
is never modified, so a call already holding it finishes against it.
"""

import logging
from typing import Callable, Optional

from google.cloud import datastore
from google.oauth2 import service_account

from cloudstore.common import conf
from cloudstore.datastore.credentials import Credentials
from cloudstore.datastore.credentials import KeyFileCredentialsProvider


# Scopes needed for Datastore operations.
DATASTORE_SCOPES = ['https://www.googleapis.com/auth/datastore']


def create_client(credentials: Credentials,
                  namespace: Optional[str] = None) -> datastore.Client:
    """Create a Datastore client scoped to the credentials' project.

    Args:
        credentials: Service account credentials to authenticate with.
        namespace: Optional Datastore namespace for keys and queries.

    Returns:
        Initialized Datastore client
    """
    signer = service_account.Credentials.from_service_account_info(
        credentials.as_info(), scopes=DATASTORE_SCOPES)
    return datastore.Client(project=credentials.project_id,
                            namespace=namespace,
                            credentials=signer)


class ConnectionManager:
    """Holds the live Datastore client and rebuilds it on demand."""

    def __init__(self, credentials_provider=None,
                 client_factory: Optional[Callable] = None,
                 namespace: Optional[str] = None):
        """Initialize the manager and open the first connection.

        Args:
            credentials_provider: Object with a get_credentials() method.
                Defaults to reading conf.GOOGLE_APPLICATION_CREDENTIALS.
            client_factory: Callable taking (credentials, namespace) and
                returning a client.  Defaults to create_client.
            namespace: Datastore namespace, defaults to
                conf.DATASTORE_NAMESPACE.
        """
        if credentials_provider is None:
            credentials_provider = KeyFileCredentialsProvider(
                conf.GOOGLE_APPLICATION_CREDENTIALS)
        if namespace is None:
            namespace = conf.DATASTORE_NAMESPACE
        self._credentials_provider = credentials_provider
        self._client_factory = client_factory or create_client
        self._namespace = namespace
        self._client = None
        # Number of times renew() has built a client, including the first.
        self.renewals = 0
        self.renew()

    def renew(self) -> None:
        """Fetch fresh credentials and replace the live client.

        Any error raised while fetching credentials propagates as is.
        """
        credentials = self._credentials_provider.get_credentials()
        client = self._client_factory(credentials, self._namespace)
        self._client = client
        self.renewals += 1
        logging.info("Connected to Datastore project %s (connection #%d)",
                     credentials.project_id, self.renewals)

    def current(self) -> datastore.Client:
        """Returns the live client."""
        return self._client
