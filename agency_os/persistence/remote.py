"""
RemoteStore - optional one-shot startup read from a PostgREST endpoint.

Rows come back snake_case; ``Snapshot.from_dict`` accepts either casing.
Any failure (not configured, network, auth, bad payload) yields None and
the caller keeps its local snapshot.
"""

import logging

import httpx

from .. import config

logger = logging.getLogger(__name__)

TABLES = ("clients", "tasks", "posts", "protocols", "onboardings")


class RemoteStore:
    """Read-only client for the remote copy of the snapshot."""

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = (config.REMOTE_URL if url is None else url).rstrip("/")
        self.key = config.REMOTE_KEY if key is None else key
        self.timeout = config.REMOTE_TIMEOUT if timeout is None else timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return config.remote_configured(self.url, self.key)

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=f"{self.url}/rest/v1",
            headers={
                "apikey": self.key,
                "Authorization": f"Bearer {self.key}",
                "Accept": "application/json",
            },
            timeout=self.timeout,
            transport=self.transport,
        )

    def _rows(self, client: httpx.Client, table: str, params: dict | None = None) -> list[dict]:
        response = client.get(f"/{table}", params={"select": "*", **(params or {})})
        response.raise_for_status()
        rows = response.json()
        if not isinstance(rows, list):
            raise ValueError(f"Expected a list of rows from {table}, got {type(rows).__name__}")
        return rows

    def fetch(self) -> dict | None:
        """
        Partial snapshot document, or None on any failure.

        Settings are optional: a missing or failing settings row leaves
        the key out instead of failing the whole fetch.
        """
        if not self.configured:
            return None
        try:
            with self._client() as client:
                doc = {table: self._rows(client, table) for table in TABLES}
                try:
                    settings = self._rows(client, "settings", {"id": "eq.global"})
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning("Remote settings unavailable: %s", e)
                    settings = []
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to fetch from remote store, falling back to local: %s", e)
            return None
        if settings:
            doc["settings"] = settings[0]
        logger.info(
            "Fetched remote snapshot",
            extra={"counts": {table: len(doc[table]) for table in TABLES}},
        )
        return doc
