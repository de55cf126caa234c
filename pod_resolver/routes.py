"""HTTP route registrations for the pod resolver."""

import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from pod_resolver.client import PodLookupClient, PodLookupError

logger = logging.getLogger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
UPSTREAM_UNAVAILABLE_MESSAGE = "Error: Kubernetes API unavailable"


class PodHostInfo(BaseModel):
    """Response record for a resolved pod."""

    model_config = ConfigDict(populate_by_name=True)

    host_ip: str = Field(alias="HostIP")


@dataclass
class ResolverDependencies:
    """Runtime dependencies required by the resolver routes."""

    lookup_client: PodLookupClient | None = None

    def attach_client(self, client: PodLookupClient) -> None:
        self.lookup_client = client

    def detach_client(self) -> None:
        self.lookup_client = None

    def require_client(self) -> PodLookupClient:
        if self.lookup_client is None:
            raise RuntimeError("Pod lookup client is not initialized.")
        return self.lookup_client


def build_routes(dependencies: ResolverDependencies) -> list[Route]:
    """Build the routes that resolve pod names to host IPs."""

    async def resolve_pod(request: Request) -> Response:
        client_addr = (
            f"{request.client.host}:{request.client.port}" if request.client else "unknown"
        )
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        logger.info("%s: %s", client_addr, target)

        names = request.query_params.getlist("podName")
        if not names or not names[0].strip():
            return Response(headers=CORS_HEADERS)
        pod_name = names[0]

        client = dependencies.require_client()
        try:
            result = await run_in_threadpool(client.fetch_host_ip, pod_name)
        except PodLookupError as exc:
            logger.warning("Pod lookup failed due to upstream error: %s", exc)
            return PlainTextResponse(
                UPSTREAM_UNAVAILABLE_MESSAGE, status_code=502, headers=CORS_HEADERS
            )

        if not result.found:
            return PlainTextResponse(result.message, headers=CORS_HEADERS)

        payload = PodHostInfo(host_ip=result.host_ip)
        return JSONResponse(payload.model_dump(by_alias=True), headers=CORS_HEADERS)

    routes = [Route("/resolvePod/{rest:path}", resolve_pod, methods=["GET"])]
    logger.info("Pod resolver routes registered.")
    return routes
