from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
import httpx
import logging

from chatmemory.Application.dependencies import dependencies

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/proxy", tags=["Proxy"])

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@router.api_route("/{target}/{path:path}", methods=METHODS)
async def relay(target: str, path: str, request: Request):
    proxyRelay = dependencies.proxyRelay()
    if target not in proxyRelay.TARGETS:
        return JSONResponse(status_code=404, content={"error": "Not found"})

    body = await request.body()
    try:
        status_code, headers, content = await proxyRelay.forward(
            target=target,
            method=request.method,
            path=path,
            query=request.url.query,
            headers=dict(request.headers),
            body=body
        )
    except httpx.HTTPError as e:
        logger.error(f"[{target}] Proxy error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(e)}
        )

    return Response(content=content, status_code=status_code, headers=headers)
