"""In-memory stand-in for the Pivotal Network endpoints the suite uses.

Serves the releases, product files and user groups it was seeded with,
enforces `Authorization: Token <token>`, and actually removes releases on
DELETE so that repeated lookups observe the deletion.
"""

from __future__ import annotations

import multiprocessing
import socket
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import uvicorn
from fastapi import FastAPI, Header, HTTPException, Response


class FakePivnetState:
    def __init__(
        self,
        *,
        token: str,
        releases: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        product_files: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        user_groups: Optional[Dict[int, List[Dict[str, Any]]]] = None,
    ) -> None:
        self.token = token
        self.releases = {slug: list(items) for slug, items in (releases or {}).items()}
        self.product_files = {slug: list(items) for slug, items in (product_files or {}).items()}
        self.user_groups = {release_id: list(items) for release_id, items in (user_groups or {}).items()}
        self.deleted: List[int] = []
        self._lock = threading.Lock()

    def delete_release(self, slug: str, release_id: int) -> bool:
        with self._lock:
            releases = self.releases.get(slug, [])
            remaining = [release for release in releases if release["id"] != release_id]
            if len(remaining) == len(releases):
                return False
            self.releases[slug] = remaining
            self.deleted.append(release_id)
            return True


def create_app(state: FakePivnetState) -> FastAPI:
    app = FastAPI(title="fake-pivnet")

    def authorize(authorization: Optional[str]) -> None:
        if authorization != f"Token {state.token}":
            raise HTTPException(status_code=401, detail="unauthorized")

    def require_product(slug: str) -> None:
        if slug not in state.releases and slug not in state.product_files:
            raise HTTPException(status_code=404, detail=f"product {slug} not found")

    @app.get("/api/v2/products/{slug}/releases")
    def list_releases(slug: str, authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
        authorize(authorization)
        require_product(slug)
        return {"releases": state.releases.get(slug, [])}

    @app.delete("/api/v2/products/{slug}/releases/{release_id}", status_code=204)
    def delete_release(
        slug: str,
        release_id: int,
        authorization: Optional[str] = Header(default=None),
    ) -> Response:
        authorize(authorization)
        if not state.delete_release(slug, release_id):
            raise HTTPException(status_code=404, detail=f"release {release_id} not found")
        return Response(status_code=204)

    @app.get("/api/v2/products/{slug}/product_files")
    def list_product_files(slug: str, authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
        authorize(authorization)
        require_product(slug)
        return {"product_files": state.product_files.get(slug, [])}

    @app.get("/api/v2/products/{slug}/releases/{release_id}/user_groups")
    def list_user_groups(
        slug: str,
        release_id: int,
        authorization: Optional[str] = Header(default=None),
    ) -> Dict[str, Any]:
        authorize(authorization)
        require_product(slug)
        if not any(release["id"] == release_id for release in state.releases.get(slug, [])):
            raise HTTPException(status_code=404, detail=f"release {release_id} not found")
        return {"user_groups": state.user_groups.get(release_id, [])}

    return app


def serve(seed: Dict[str, Any], host: str = "127.0.0.1", port: int = 8765) -> None:
    """Run the fake service in the foreground; `seed` holds `FakePivnetState` kwargs."""
    config = uvicorn.Config(
        create_app(FakePivnetState(**seed)),
        host=host,
        port=port,
        log_level="error",
        access_log=False,
    )
    uvicorn.Server(config).run()


def _unused_port(host: str) -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.bind((host, 0))
        return listener.getsockname()[1]


def _accepts_connections(host: str, port: int, deadline: float) -> bool:
    while time.monotonic() < deadline:
        try:
            socket.create_connection((host, port), timeout=0.5).close()
        except OSError:
            time.sleep(0.1)
        else:
            return True
    return False


@contextmanager
def running(seed: Dict[str, Any], *, host: str = "127.0.0.1", startup_timeout: float = 20.0) -> Iterator[str]:
    """Serve a freshly seeded fake in a spawned process and yield its base URL."""
    port = _unused_port(host)
    process = multiprocessing.get_context("spawn").Process(target=serve, args=(seed, host, port), daemon=True)
    process.start()
    try:
        if not _accepts_connections(host, port, time.monotonic() + startup_timeout):
            raise RuntimeError(f"fake Pivotal Network service did not start on {host}:{port}")
        yield f"http://{host}:{port}"
    finally:
        process.terminate()
        process.join(timeout=5)
        if process.is_alive():
            process.kill()
            process.join(timeout=2)
