# connections_manager.py
"""
connections_manager.py
----------------------
Manages store connections and sessions

Holds in-memory sessions to the content stores bundles are imported into.

Creates store connectors as needed.
    Connectors are proxy objects to the remote store.
Reuses existing sessions when possible.

"""

from connectors.rest_store_connector import RestStoreConnector, RestStoreSession
from connectors.store_interface import HierarchicalStore

######################### Sessions #########################


## the manager is this module itself

# variable to hold active sessions:

_active_sessions: dict[tuple[str, str], RestStoreSession] = {}
# key: (hostURL, user) tuple
# value: session instance
# This allows unique sessions per (hostURL, user) pair.

# create a session. If a matching session already exists, return it.
def get_session(store_type: str, host_URL: str, user: str, password: str) -> RestStoreSession:
    """
    Get or create a store session for the given parameters.
    Reuses existing sessions if one matches the (hostURL, user) pair.
    """
    key = (host_URL, user)
    if key in _active_sessions:
        return _active_sessions[key]
        # by now, we do not erase sessions, even dead ones

    # Create a new session based on store_type
    if store_type == "rest":
        session = RestStoreSession(host_URL, user, password)
    # Add other store types here as needed
    else:
        raise ValueError(f"Unsupported store type: {store_type}")

    session.connect()
    _active_sessions[key] = session
    return session


def get_store(store_type: str, host_URL: str, user: str, password: str) -> HierarchicalStore:
    """Connector for the store behind a (possibly reused) session."""
    return RestStoreConnector(get_session(store_type, host_URL, user, password))


def close_sessions() -> None:
    """Disconnect and forget every active session."""
    for session in _active_sessions.values():
        session.disconnect()
    _active_sessions.clear()
