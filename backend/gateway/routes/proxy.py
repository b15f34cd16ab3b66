import logging
from urllib.parse import quote

import httpx
from fastapi import APIRouter, HTTPException, Request, Response

router = APIRouter()

logger = logging.getLogger(__name__)

# Hop-by-hop headers are never relayed. content-length / content-encoding are
# dropped on the way back because httpx hands us the decoded body.
HOP_BY_HOP = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}
REQUEST_SKIP = HOP_BY_HOP | {"host", "content-length"}
RESPONSE_SKIP = HOP_BY_HOP | {"content-length", "content-encoding"}


def _filter_headers(items, skip):
    return [(k, v) for k, v in items if k.lower() not in skip]


def _upstream_target(request: Request, path: str) -> httpx.URL:
    # raw_path is still percent-encoded: %2F and %3F must reach the upstream as sent
    prefix = request.app.state.settings.api_prefix.rstrip("/").encode("ascii")
    raw_path = request.scope.get("raw_path")
    if raw_path is None:
        raw_path = quote(request.url.path).encode("ascii")
    if raw_path.startswith(prefix):
        raw_path = raw_path[len(prefix):]
    else:
        raw_path = b"/" + quote(path).encode("ascii")
    if not raw_path.startswith(b"/"):
        raw_path = b"/" + raw_path

    query = request.scope.get("query_string", b"")
    if query:
        raw_path += b"?" + query
    return httpx.URL(raw_path=raw_path)


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
)
async def forward(path: str, request: Request):
    """
    Forward the request to the upstream with the mount prefix already removed.

    `/api/predict-emotion/` arrives here as path="predict-emotion/" and goes
    upstream as `/predict-emotion/`. Method, headers, query and body are passed
    through untouched; the upstream status, headers and body come back as-is.
    """
    client: httpx.AsyncClient = request.app.state.upstream
    body = await request.body()

    upstream_request = client.build_request(
        request.method,
        _upstream_target(request, path),
        headers=_filter_headers(request.headers.items(), REQUEST_SKIP),
        content=body,
    )
    logger.info("Forwarding %s %s -> %s", request.method, request.url.path, upstream_request.url)

    try:
        upstream_response = await client.send(upstream_request)
    except httpx.RequestError as e:
        logger.warning("Upstream request failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Upstream error: {e}")

    response = Response(content=upstream_response.content, status_code=upstream_response.status_code)
    # multi_items keeps repeated headers such as set-cookie
    for key, value in _filter_headers(upstream_response.headers.multi_items(), RESPONSE_SKIP):
        response.headers.append(key, value)
    return response
