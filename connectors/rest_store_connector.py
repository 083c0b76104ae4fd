import base64
from typing import Any
import uuid
import httpx

from box import Box
from connectors.store_interface import FileData, HierarchicalStore
from orchestrator.models import AccessControlList, RepositoryEntry


##### Sessions #####
class RestStoreSession:
    """
    A session against the mock store REST API.

    Args:
        host_URL (str): The base URL of the store.
            Must include scheme (http:// or https://) and optionally port.
            Examples: "http://localhost:8000", "https://repository.example.com"
        user (str): The username for authentication.
        password (str): The password for authentication.
        client (httpx.Client): Optional preconfigured client, e.g. a
            fastapi TestClient. Requests are then sent to relative URLs.
    """
    def __init__(self, host_URL: str, user: str, password: str, client: httpx.Client | None = None):
        self.base_URL = host_URL.rstrip("/")
        self.user = user
        self.password = password
        self.session_id = str(uuid.uuid4())
        self._client = client if client is not None else httpx.Client(base_url=self.base_URL, auth=(user, password))

    def request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Make an HTTP request to the store.
        raise_for_status() is called on the response.

        Args:
            method (str): The HTTP method (GET, POST, PUT).
            endpoint (str): The API endpoint (path) to call.
            **kwargs: Additional arguments to pass to httpx request.
            example: session.request("GET", "/entries", params={"path": "/public"})

        Returns:
            httpx.Response: The HTTP response object.
        """
        response = self._client.request(method, f"/{endpoint.lstrip('/')}", **kwargs)
        response.raise_for_status()
        return response

    @property
    def store_type(self) -> str:
        return "rest"

    @property
    def is_alive(self) -> bool:
        """Check if the session is alive by making a test request to the store."""
        try:
            resp = self.request("GET", "/status", timeout=2)
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    def connect(self):
        """Establish the session. The mock store has no tokens, so just check it answers."""
        if not self.is_alive:
            raise ConnectionError(f"Cannot connect to store at {self.base_URL}")

    def disconnect(self):
        self._client.close()


##### Connectors #####

class RestStoreConnector(HierarchicalStore):
    """ Hierarchical store implementation over the mock store REST API."""

    def __init__(self, session: RestStoreSession):
        self.session: RestStoreSession = session
        self.request = self.session.request  # "alias" Now self.request(...) is the same as self.session.request(...)

    @property
    def status(self) -> Box:
        r = self.request("GET", "/status")
        return Box(r.json())

    @property
    def info(self) -> Box:
        """ Returns information about the connector as a Box."""
        return Box({
            "type": self.session.store_type,
            "hostURL": self.session.base_URL,
            "user": self.session.user
        })

    def get_entry(self, path: str) -> RepositoryEntry | None:
        try:
            r = self.request("GET", "/entries", params={"path": path})
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise
        return RepositoryEntry.model_validate(r.json())

    def list_children(self, path: str) -> list[RepositoryEntry]:
        r = self.request("GET", "/children", params={"path": path})
        return [RepositoryEntry.model_validate(entry) for entry in r.json()]

    def create_folder(self, parent_id: Any, entry: RepositoryEntry,
                      acl: AccessControlList | None = None, comment: str | None = None) -> RepositoryEntry:
        payload = _create_payload(parent_id, entry, acl, comment)
        r = self.request("POST", "/folders", json=payload)
        return RepositoryEntry.model_validate(r.json())

    def create_file(self, parent_id: Any, entry: RepositoryEntry, data: FileData,
                    acl: AccessControlList | None = None, comment: str | None = None) -> RepositoryEntry:
        payload = _create_payload(parent_id, entry, acl, comment)
        payload["content"] = _encode(data)
        r = self.request("POST", "/files", json=payload)
        return RepositoryEntry.model_validate(r.json())

    def update_file(self, entry: RepositoryEntry, data: FileData, comment: str | None = None) -> RepositoryEntry:
        if entry.id is None:
            raise ValueError("Entry id is required for an update")
        r = self.request("PUT", f"/files/{entry.id}", json={"content": _encode(data), "comment": comment})
        return RepositoryEntry.model_validate(r.json())


def _create_payload(parent_id: Any, entry: RepositoryEntry, acl: AccessControlList | None,
                    comment: str | None) -> dict[str, Any]:
    return {
        "parent_id": str(parent_id),
        "entry": {"name": entry.name, "hidden": entry.hidden},
        "acl": acl.model_dump(mode="json") if acl is not None else None,
        "comment": comment,
    }


def _encode(data: FileData) -> dict[str, Any]:
    return {
        "data": base64.b64encode(data.data).decode("ascii"),
        "encoding": data.get("encoding"),
        "mime_type": data.get("mime_type"),
    }
