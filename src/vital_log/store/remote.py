"""Remote document store boundary.

The remote side only ever sees whole collections: ``replace_all`` swaps a
collection atomically and ``fetch_all`` returns it in full. Items are the
``to_dict()`` form of the models.
"""

import copy
from typing import Protocol

import httpx
import structlog

from ..errors import RemoteStoreError

logger = structlog.get_logger(__name__)


class RemoteStore(Protocol):
    """Per-user remote storage for history collections and the profile."""

    async def replace_all(self, collection: str, items: list[dict]) -> None: ...

    async def fetch_all(self, collection: str) -> list[dict]: ...

    async def get_profile(self) -> dict | None: ...

    async def set_profile(self, profile: dict) -> None: ...


class InMemoryRemoteStore:
    """Remote store held in process memory.

    Values are deep-copied on the way in and out so callers cannot mutate
    stored state.
    """

    def __init__(self):
        self.collections: dict[str, list[dict]] = {}
        self.profile: dict | None = None

    async def replace_all(self, collection: str, items: list[dict]) -> None:
        self.collections[collection] = copy.deepcopy(items)

    async def fetch_all(self, collection: str) -> list[dict]:
        return copy.deepcopy(self.collections.get(collection, []))

    async def get_profile(self) -> dict | None:
        return copy.deepcopy(self.profile)

    async def set_profile(self, profile: dict) -> None:
        self.profile = copy.deepcopy(profile)


class HttpRemoteStore:
    """Remote store backed by the vital-log sync server."""

    def __init__(
        self,
        base_url: str,
        user_id: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Server root, e.g. ``http://localhost:8000``
            user_id: Namespace on the server
            token: Bearer token sent with every request
            timeout: httpx timeout per request in seconds
            transport: Optional transport, used to talk to an app in-process
        """
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self.log = logger.bind(component="http_remote_store", user_id=user_id)

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, json: dict | None = None) -> httpx.Response:
        url = f"/users/{self.user_id}{path}"
        try:
            async with self._client() as client:
                response = await client.request(method, url, json=json)
        except httpx.HTTPError as e:
            self.log.warning("remote_request_failed", method=method, path=url, error=str(e))
            raise RemoteStoreError(f"{method} {url} failed: {e}") from e

        if response.status_code == 404:
            return response
        if response.is_error:
            self.log.warning(
                "remote_request_rejected",
                method=method,
                path=url,
                status_code=response.status_code,
            )
            raise RemoteStoreError(
                f"{method} {url} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _decode(self, response: httpx.Response, key: str):
        """Pull one field out of a JSON reply.

        Raises:
            RemoteStoreError: If the body is not JSON or lacks the field
        """
        try:
            return response.json()[key]
        except (ValueError, KeyError, TypeError) as e:
            self.log.warning("remote_response_malformed", path=str(response.url), error=str(e))
            raise RemoteStoreError(
                f"Malformed response from {response.url}: {e}",
                status_code=response.status_code,
            ) from e

    async def replace_all(self, collection: str, items: list[dict]) -> None:
        response = await self._request("PUT", f"/collections/{collection}", {"items": items})
        if response.status_code == 404:
            raise RemoteStoreError(f"Unknown collection: {collection}", status_code=404)

    async def fetch_all(self, collection: str) -> list[dict]:
        response = await self._request("GET", f"/collections/{collection}")
        if response.status_code == 404:
            raise RemoteStoreError(f"Unknown collection: {collection}", status_code=404)
        items = self._decode(response, "items")
        if not isinstance(items, list):
            raise RemoteStoreError(f"Collection {collection} is not a list", status_code=response.status_code)
        return items

    async def get_profile(self) -> dict | None:
        response = await self._request("GET", "/profile")
        if response.status_code == 404:
            return None
        return self._decode(response, "profile")

    async def set_profile(self, profile: dict) -> None:
        response = await self._request("PUT", "/profile", {"profile": profile})
        if response.status_code == 404:
            raise RemoteStoreError("Profile endpoint not found", status_code=404)


def create_remote_store(sync_config) -> RemoteStore:
    """Build the remote store named by configuration.

    Raises:
        ValueError: If no remote URL is configured
    """
    if not sync_config.remote_url:
        raise ValueError("No remote URL configured. Set VITAL_LOG_REMOTE_URL.")
    return HttpRemoteStore(
        base_url=sync_config.remote_url,
        user_id=sync_config.user_id,
        token=sync_config.remote_token,
        timeout=sync_config.timeout_seconds,
    )
