"""Settings for cloudstore.

Defaults live here.  A settings.py and then a settings_local.py found in the
current directory override them, and the GOOGLE_APPLICATION_CREDENTIALS
environment variable overrides the key file location.
"""

import importlib
import os
import os.path as op
import sys


GOOGLE_APPLICATION_CREDENTIALS = op.expanduser(
    '~/.cloudstore_service_account_key.json')
DATASTORE_NAMESPACE = None
DATASTORE_RETRY_DELAY_S = 5
DUMP_PAGE_SIZE = 500


# to import settings / settings_local:
_cwd = os.path.abspath(os.getcwd())
if _cwd not in sys.path:
    sys.path.append(_cwd)

for _name in ('settings', 'settings_local'):
    try:
        _module = importlib.import_module(_name)
    except ImportError as exc:
        if exc.name == _name:
            # Both files are optional.
            continue
        sys.stderr.write('** Trying to import %s.py in %s\n'
                         % (_name, os.getcwd()))
        raise
    globals().update(
        (k, v) for k, v in vars(_module).items() if k.isupper())

if os.environ.get('GOOGLE_APPLICATION_CREDENTIALS'):
    GOOGLE_APPLICATION_CREDENTIALS = os.environ['GOOGLE_APPLICATION_CREDENTIALS']
