"""Per-resource single-flight guard for mutating requests."""

import logging
import threading
from contextlib import contextmanager

from .errors import ResourceBusy

logger = logging.getLogger(__name__)


def table_key(city):
    return ("table", city)


CITIES_KEY = ("cities",)


class SingleFlight:
    """Allows at most one holder per key; overlapping holders are rejected."""

    def __init__(self):
        self.lock = threading.Lock()
        self._in_flight = set()

    @contextmanager
    def hold(self, key, resource=None):
        with self.lock:
            if key in self._in_flight:
                logger.warning("Rejected overlapping request for %s", resource or key)
                raise ResourceBusy(key, resource)
            self._in_flight.add(key)
        try:
            yield
        finally:
            with self.lock:
                self._in_flight.discard(key)

    def busy(self, key):
        with self.lock:
            return key in self._in_flight
