import unittest
from mock import Mock, patch

from cloudstore.datastore import connection
from cloudstore.datastore.credentials import Credentials
from cloudstore.datastore.fake_datastore_test import (
    FakeClientFactory, TEST_KEY_INFO, get_test_credentials_provider)


class ConnectionManagerTest(unittest.TestCase):

    def test_connects_on_construction(self):
        factory = FakeClientFactory()
        manager = connection.ConnectionManager(
            get_test_credentials_provider(), factory)
        self.assertEqual(1, manager.renewals)
        self.assertIs(factory.clients[0], manager.current())
        self.assertEqual('test-project', manager.current().project)

    def test_renew_replaces_client(self):
        factory = FakeClientFactory()
        manager = connection.ConnectionManager(
            get_test_credentials_provider(), factory)
        old = manager.current()
        manager.renew()
        self.assertIsNot(old, manager.current())
        self.assertEqual(2, manager.renewals)
        # The old client is left untouched and still usable.
        self.assertIs(factory.backend, old.backend)

    def test_renew_fetches_fresh_credentials(self):
        provider = Mock()
        provider.get_credentials.side_effect = [
            Credentials.from_info(TEST_KEY_INFO),
            Credentials.from_info(dict(TEST_KEY_INFO, project_id='other')),
        ]
        manager = connection.ConnectionManager(provider, FakeClientFactory())
        manager.renew()
        self.assertEqual(2, provider.get_credentials.call_count)
        self.assertEqual('other', manager.current().project)

    def test_credential_failure_propagates(self):
        provider = Mock()
        provider.get_credentials.side_effect = IOError('no key file')
        self.assertRaises(IOError, connection.ConnectionManager,
                          provider, FakeClientFactory())

    def test_namespace_passed_to_client(self):
        manager = connection.ConnectionManager(
            get_test_credentials_provider(), FakeClientFactory(),
            namespace='staging')
        self.assertEqual('staging', manager.current().namespace)

    @patch('cloudstore.datastore.connection.datastore.Client')
    @patch('cloudstore.datastore.connection.service_account.Credentials')
    def test_create_client(self, mock_sa_credentials, mock_client):
        creds = Credentials.from_info(TEST_KEY_INFO)
        client = connection.create_client(creds, 'ns')
        mock_sa_credentials.from_service_account_info.assert_called_once_with(
            TEST_KEY_INFO, scopes=connection.DATASTORE_SCOPES)
        mock_client.assert_called_once_with(
            project='test-project', namespace='ns',
            credentials=mock_sa_credentials.from_service_account_info
            .return_value)
        self.assertIs(mock_client.return_value, client)
