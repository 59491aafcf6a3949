import importlib
import os
import sys
import tempfile
import unittest
from mock import patch

from cloudstore.common import conf


class ConfTest(unittest.TestCase):

    def setUp(self):
        self.old_cwd = os.getcwd()
        self.tmpdir = tempfile.mkdtemp()
        os.chdir(self.tmpdir)
        self.saved_modules = {
            name: sys.modules.pop(name)
            for name in ('settings', 'settings_local') if name in sys.modules}

    def tearDown(self):
        os.chdir(self.old_cwd)
        for name in ('settings', 'settings_local'):
            sys.modules.pop(name, None)
        sys.modules.update(self.saved_modules)
        for fn in os.listdir(self.tmpdir):
            os.unlink(os.path.join(self.tmpdir, fn))
        os.rmdir(self.tmpdir)
        while self.tmpdir in sys.path:
            sys.path.remove(self.tmpdir)
        importlib.reload(conf)

    def _write(self, name, text):
        with open(os.path.join(self.tmpdir, name), 'w') as fp:
            fp.write(text)

    def _reload(self):
        importlib.invalidate_caches()
        # Only look in the temporary directory for settings files.
        with patch.object(sys, 'path', [self.tmpdir] + [
                p for p in sys.path
                if p not in ('', self.old_cwd,
                             os.path.abspath(self.old_cwd))]):
            importlib.reload(conf)

    def test_defaults_without_settings(self):
        with patch.dict(os.environ):
            os.environ.pop('GOOGLE_APPLICATION_CREDENTIALS', None)
            self._reload()
        self.assertEqual(5, conf.DATASTORE_RETRY_DELAY_S)
        self.assertEqual(None, conf.DATASTORE_NAMESPACE)
        self.assertTrue(conf.GOOGLE_APPLICATION_CREDENTIALS.endswith(
            '.cloudstore_service_account_key.json'))

    def test_settings_local_wins(self):
        self._write('settings.py', 'DATASTORE_RETRY_DELAY_S = 1\n'
                                   'DATASTORE_NAMESPACE = "prod"\n')
        self._write('settings_local.py', 'DATASTORE_RETRY_DELAY_S = 2\n')
        self._reload()
        self.assertEqual(2, conf.DATASTORE_RETRY_DELAY_S)
        self.assertEqual('prod', conf.DATASTORE_NAMESPACE)

    def test_environment_overrides_key_file(self):
        self._write('settings.py', 'GOOGLE_APPLICATION_CREDENTIALS = "/a"\n')
        with patch.dict(os.environ, {'GOOGLE_APPLICATION_CREDENTIALS': '/b'}):
            self._reload()
        self.assertEqual('/b', conf.GOOGLE_APPLICATION_CREDENTIALS)

    def test_broken_settings_raise(self):
        self._write('settings.py', 'import no_such_module_here\n')
        self.assertRaises(ImportError, self._reload)

    def test_reload_adds_cwd_to_path_once(self):
        cwd = os.path.abspath(os.getcwd())
        with patch.object(sys, 'path', [p for p in sys.path if p != cwd]):
            importlib.reload(conf)
            importlib.reload(conf)
            self.assertEqual(1, sys.path.count(cwd))
