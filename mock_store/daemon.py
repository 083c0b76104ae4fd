"""
mock_store.daemon
-----------------
This module implements a mock hierarchical content store REST API using FastAPI.
It provides endpoints to look up entries by path, create folders and files,
and replace file content in an in-memory store. Intended for local
development, testing, and demonstration of the import pipeline.
"""
import base64
import binascii
import json
import os
import socket
import sys

import typer
import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from common.app_setup import setup_logging
from connectors.memory_store import InMemoryStore
from connectors.store_interface import FileData
from orchestrator.models import AccessControlList, RepositoryEntry


# Pydantic models for request validation
class EntryModel(BaseModel):
    name: str = Field(..., min_length=1)
    hidden: bool = False


class FolderCreateModel(BaseModel):
    parent_id: str
    entry: EntryModel
    acl: AccessControlList | None = None
    comment: str | None = None


class FileContentModel(BaseModel):
    data: str = Field(..., description="base64 encoded content")
    encoding: str | None = None
    mime_type: str | None = None


class FileCreateModel(FolderCreateModel):
    content: FileContentModel


class FileUpdateModel(BaseModel):
    content: FileContentModel
    comment: str | None = None


# Set up logging for the daemon
logger = setup_logging(app_name="mockstored", daemon=True)

# In-memory store, seeded with the usual top-level folders
store = InMemoryStore(folders=("/public", "/home"))

app = FastAPI()


def get_server():
    # Helper to get the running server instance
    return getattr(app.state, "uvicorn_server", None)


def _decode(content: FileContentModel) -> FileData:
    try:
        raw = base64.b64decode(content.data, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=422, detail="File content is not valid base64")
    return FileData(data=raw, encoding=content.encoding, mime_type=content.mime_type)


@app.post("/shutdown")
def shutdown():
    """Shutdown the server gracefully."""
    logger.info("Shutdown requested via /shutdown endpoint.")
    server = get_server()
    if server:
        server.should_exit = True
    return {"message": "Server shutting down"}


@app.get("/status")
def status():
    """Health/status endpoint for the mock store daemon."""
    server = get_server()
    state = "shutting_down" if server and server.should_exit else "ok"
    return {"status": state, "entries": store.entry_count}


@app.get("/entries", response_model=RepositoryEntry)
def get_entry(path: str) -> RepositoryEntry:
    """Retrieve the entry stored at a repository path."""
    entry = store.get_entry(path)
    if entry is None:
        logger.debug(f"Entry not found: {path}")
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@app.get("/children", response_model=list[RepositoryEntry])
def list_children(path: str) -> list[RepositoryEntry]:
    """List the entries directly below a folder."""
    try:
        return store.list_children(path)
    except KeyError:
        raise HTTPException(status_code=404, detail="Entry not found")


@app.post("/folders", response_model=RepositoryEntry, status_code=201)
def create_folder(request: FolderCreateModel) -> RepositoryEntry:
    entry = RepositoryEntry(name=request.entry.name, folder=True, hidden=request.entry.hidden)
    try:
        created = store.create_folder(request.parent_id, entry, request.acl, request.comment)
    except KeyError:
        raise HTTPException(status_code=404, detail="Parent folder not found")
    except ValueError as e:
        logger.warning(f"Cannot create folder {entry.name!r}: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    logger.info(f"Created folder: {created.path}")
    return created


@app.post("/files", response_model=RepositoryEntry, status_code=201)
def create_file(request: FileCreateModel) -> RepositoryEntry:
    entry = RepositoryEntry(name=request.entry.name, folder=False, hidden=request.entry.hidden)
    data = _decode(request.content)
    try:
        created = store.create_file(request.parent_id, entry, data, request.acl, request.comment)
    except KeyError:
        raise HTTPException(status_code=404, detail="Parent folder not found")
    except ValueError as e:
        logger.warning(f"Cannot create file {entry.name!r}: {e}")
        raise HTTPException(status_code=409, detail=str(e))
    logger.info(f"Created file: {created.path} (hidden={created.hidden})")
    return created


@app.put("/files/{entry_id}", response_model=RepositoryEntry)
def update_file(entry_id: str, request: FileUpdateModel) -> RepositoryEntry:
    data = _decode(request.content)
    try:
        entry = store.get_by_id(entry_id)
        updated = store.update_file(entry, data, request.comment)
    except KeyError:
        raise HTTPException(status_code=404, detail="Entry not found")
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    logger.info(f"Updated file: {updated.path}")
    return updated


app_cli = typer.Typer()

HOST = "127.0.0.1"
EXIT_ADDRESS_IN_USE = 98


def _reserve_port(port: int | None) -> tuple[int, str]:
    """Return a bindable port and the event name announced for it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        if not port:
            s.bind((HOST, 0))
            return s.getsockname()[1], "port_selected"
        s.bind((HOST, port))
        return port, "port_used"


@app_cli.command()
def run(port: int = typer.Option(None, help="Port to run the server on (auto if not set)")):
    """Serve the mock store on localhost and announce the port as a JSON line on stdout."""
    try:
        port, event = _reserve_port(port)
    except OSError:
        logger.error(f"Port {port} is already in use.")
        sys.exit(EXIT_ADDRESS_IN_USE)
    print(json.dumps({"event": event, "port": port}), flush=True)

    server = uvicorn.Server(uvicorn.Config(app, host=HOST, port=port, log_level="info"))
    app.state.uvicorn_server = server
    logger.info(f"Serving mock store on {HOST}:{port} ({store.entry_count} entries)")
    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    logger.info("Mock store stopped")
    os._exit(0)


if __name__ == "__main__":
    app_cli()
