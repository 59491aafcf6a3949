import os.path as op


# Service account key used to talk to Cloud Datastore.  You can create a new
# key on the API manager credentials page:
# https://console.cloud.google.com/apis/credentials
GOOGLE_APPLICATION_CREDENTIALS = op.expanduser('~/.cloudstore_service_account_key.json')

# Datastore namespace for every key and query; None means the default one.
DATASTORE_NAMESPACE = None

# How long to wait before reconnecting and retrying a failed remote call.
DATASTORE_RETRY_DELAY_S = 5

# Page size used by do_dump_kind.
DUMP_PAGE_SIZE = 500
