"""
Client for the webhook service that owns the roster and city tables.

Every operation is a single request: a non-2xx answer becomes a
``GatewayError`` carrying the operation's message, and transport errors from
``requests`` propagate as they are.  Nothing is retried and no state is kept
between calls.
"""

import logging
from urllib.parse import urljoin

import requests

from .config import DEFAULT_WEBHOOK_BASE_URL
from .errors import GatewayError
from .roster import group_by_city

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "login": "login-antecip",
    "fetch_roster": "display-table-antecip",
    "fetch_cities": "cities-table-antecip",
    "add_city": "cities-add-antecip",
    "delete_city": "cities-delete-antecip",
    "clear_city_table": "delete-table-antecip",
    "upload_people": "add-table-antecip",
}


class WebhookGateway:
    """Thin request/response wrapper around the webhook endpoints."""

    def __init__(self, base_url=DEFAULT_WEBHOOK_BASE_URL, timeout=30, session=None):
        if not base_url.endswith("/"):
            base_url += "/"
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, operation):
        return urljoin(self.base_url, ENDPOINTS[operation])

    def _request(self, operation, failure, method="POST", payload=None):
        url = self.url_for(operation)
        logger.info("%s %s (%s)", method, url, operation)
        kwargs = {"timeout": self.timeout}
        if payload is not None:
            kwargs["json"] = payload
        response = self.session.request(method, url, **kwargs)
        if not 200 <= response.status_code < 300:
            logger.warning("%s failed with HTTP %s", operation, response.status_code)
            raise GatewayError(failure, response.status_code)
        return response

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def login(self, username, password):
        response = self._request("login", "Login failed", payload={"username": username, "password": password})
        return response.json()

    def fetch_roster(self):
        """Fetch every person and return them grouped by city."""
        response = self._request("fetch_roster", "Failed to fetch data", method="GET")
        try:
            payload = response.json()
        except ValueError as exc:
            raise GatewayError("Failed to fetch data", response.status_code) from exc
        return group_by_city(payload)

    def fetch_cities(self):
        response = self._request("fetch_cities", "Failed to fetch cities", method="GET")
        try:
            cities = response.json()
        except ValueError as exc:
            raise GatewayError("Failed to fetch cities", response.status_code) from exc
        if not isinstance(cities, list):
            # e.g. {"table": "empty"}
            return []
        return cities

    def city_names(self):
        return [c["city"] for c in self.fetch_cities() if isinstance(c, dict) and c.get("city")]

    def add_city(self, city):
        self._request("add_city", "Failed to add city", payload={"city": city})

    def delete_city(self, city):
        self._request("delete_city", "Failed to delete city", payload={"city": city})

    def clear_city_table(self, city):
        self._request("clear_city_table", "Failed to clear city table", payload={"city": city})

    def upload_people(self, people):
        """Send ``{name, cpf, city}`` rows to be stored by the service."""
        self._request("upload_people", "Failed to upload data", payload=people)
