"""
Runs remote Datastore calls with a single reconnect-and-retry.
"""

import logging
import time

from cloudstore.common import conf


class ResilientExecutor(object):
    """Executes operations against the live client of a ConnectionManager.

    If the first attempt raises anything at all, we wait retry_delay_s
    (conf.DATASTORE_RETRY_DELAY_S unless given), renew the connection and
    try exactly once more.  A second failure is passed on to the caller
    untouched.

    The policy does not look at the error: a bad argument that makes the
    backend reject the call costs the same delay as an expired token.
    """

    def __init__(self, connections, retry_delay_s=None):
        self._connections = connections
        if retry_delay_s is None:
            retry_delay_s = conf.DATASTORE_RETRY_DELAY_S
        self.retry_delay_s = retry_delay_s

    def _backoff(self):
        time.sleep(self.retry_delay_s)

    def execute(self, operation, description="datastore call"):
        """Run operation(client), retrying once after a reconnect.

        Args:
          operation: A callable taking the live datastore.Client.
          description: Human-readable name of the call, for logging.

        Returns:
          Whatever operation returns.
        """
        try:
            return operation(self._connections.current())
        except Exception:
            logging.warning("%s failed, reconnecting in %ss and retrying",
                            description, self.retry_delay_s, exc_info=True)
        self._backoff()
        self._connections.renew()
        return operation(self._connections.current())
