"""
Integration smoke test for the pod resolver.

This script spins up:
1. A mock Kubernetes API service (Starlette) that answers
   GET /api/v1/namespaces/{namespace}/pods/{name} for a couple of pods.
2. The resolver HTTP server (running in-process via uvicorn), pointed at the
   mock through a temporary kubeconfig.
3. An httpx client that queries /resolvePod/ and prints the responses.

Usage:
    uv run python scripts/smoke_test.py

The script exits with code 0 if the end-to-end flow works. Use Ctrl+C to abort.
"""

import asyncio
import contextlib
import os
import tempfile
from pathlib import Path

import httpx
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from pod_resolver.server import build_server
from pod_resolver.settings import Settings

MOCK_API_HOST = "127.0.0.1"
MOCK_API_PORT = 9071
RESOLVER_HOST = "127.0.0.1"
RESOLVER_PORT = 18585

MOCK_PODS = {"web-1": "10.0.0.5", "web-2": "10.0.0.6"}

KUBECONFIG_TEMPLATE = """\
apiVersion: v1
kind: Config
clusters:
- name: smoke
  cluster:
    server: {server}
users:
- name: smoke
  user:
    token: smoke-token
contexts:
- name: smoke
  context:
    cluster: smoke
    user: smoke
current-context: smoke
"""


async def read_pod_endpoint(request: Request) -> JSONResponse:
    namespace = request.path_params["namespace"]
    name = request.path_params["name"]
    host_ip = MOCK_PODS.get(name) if namespace == "default" else None
    if host_ip is None:
        return JSONResponse(
            {
                "kind": "Status",
                "apiVersion": "v1",
                "status": "Failure",
                "message": f'pods "{name}" not found',
                "reason": "NotFound",
                "code": 404,
            },
            status_code=404,
        )
    return JSONResponse(
        {
            "kind": "Pod",
            "apiVersion": "v1",
            "metadata": {"name": name, "namespace": namespace},
            "status": {"phase": "Running", "hostIP": host_ip},
        }
    )


def build_mock_api() -> Starlette:
    return Starlette(
        routes=[
            Route(
                "/api/v1/namespaces/{namespace:str}/pods/{name:str}",
                read_pod_endpoint,
                methods=["GET"],
            ),
        ],
    )


async def run_uvicorn_app(app: Starlette, host: str, port: int) -> uvicorn.Server:
    config = uvicorn.Config(app, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)

    async def _serve() -> None:
        await server.serve()

    asyncio.create_task(_serve())
    # Give the server a moment to bind the port.
    await asyncio.sleep(0.3)
    return server


async def run_smoke_flow(home: Path) -> None:
    print("Starting mock Kubernetes API service...")
    mock_server = await run_uvicorn_app(build_mock_api(), MOCK_API_HOST, MOCK_API_PORT)

    kube_dir = home / ".kube"
    kube_dir.mkdir(parents=True, exist_ok=True)
    (kube_dir / "config").write_text(
        KUBECONFIG_TEMPLATE.format(server=f"http://{MOCK_API_HOST}:{MOCK_API_PORT}")
    )
    os.environ["HOME"] = str(home)
    os.environ["RESOLVER_HOST"] = RESOLVER_HOST
    os.environ["RESOLVER_PORT"] = str(RESOLVER_PORT)
    settings = Settings.load()

    app_server = build_server(settings)
    app_server.startup()

    print("Starting resolver server...")
    resolver_task = asyncio.create_task(app_server.serve_async())
    await asyncio.sleep(0.5)

    try:
        async with httpx.AsyncClient(base_url=f"http://{RESOLVER_HOST}:{RESOLVER_PORT}") as client:
            found = await client.get("/resolvePod/", params={"podName": "web-1"})
            print("web-1:", found.status_code, found.text)
            assert found.json() == {"HostIP": "10.0.0.5"}

            missing = await client.get("/resolvePod/", params={"podName": "ghost"})
            print("ghost:", missing.status_code, missing.text)
            assert missing.text == "Error: Pod not found"

            empty = await client.get("/resolvePod/")
            print("no podName:", empty.status_code, repr(empty.text))
            assert empty.text == ""

            print("Smoke test succeeded")
    finally:
        print("Stopping resolver server...")
        resolver_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await resolver_task
        app_server.shutdown()

        print("Stopping mock Kubernetes API service...")
        mock_server.should_exit = True
        await asyncio.sleep(0.2)


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp_home:
        try:
            asyncio.run(run_smoke_flow(Path(tmp_home)))
        except KeyboardInterrupt:
            print("Smoke test interrupted.")
