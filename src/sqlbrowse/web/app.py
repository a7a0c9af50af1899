"""
aiohttp application exposing the table browser as a JSON:API-style gateway.
"""

import datetime
import functools
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from aiohttp import web

from .. import __version__
from ..browser import TableBrowser
from ..exceptions import SqlBrowseError
from ..serialization.envelope import error_document, serialize


logger = logging.getLogger(__name__)

API_NAME = "SQL Browser JSON:API"
CONTENT_TYPE = "application/vnd.api+json"

ENDPOINTS = {
    "tables": "/api/tables",
    "tableData": "/api/tables/:tableName",
    "query": "/api/query",
}

BROWSER_KEY = web.AppKey("browser", TableBrowser)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _encode_default(value: Any) -> Any:
    """Encode driver values that json cannot represent natively."""
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "\\x" + bytes(value).hex()
    return str(value)


dumps = functools.partial(json.dumps, default=_encode_default, allow_nan=False)


def json_api_response(
    document: Dict[str, Any],
    status: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> web.Response:
    return web.json_response(
        document, status=status, headers=headers, dumps=dumps, content_type=CONTENT_TYPE
    )


def error_response(
    status: int,
    title: str,
    detail: str,
    headers: Optional[Mapping[str, str]] = None,
) -> web.Response:
    return json_api_response(error_document(status, title, detail), status=status, headers=headers)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Render every failure as an error document."""
    try:
        return await handler(request)
    except SqlBrowseError as e:
        if e.status >= 500:
            logger.error(f"{request.method} {request.path} failed: {e}")
        return error_response(e.status, e.title, e.message)
    except web.HTTPException as e:
        if e.status < 400:
            raise
        # keep Allow on 405
        headers = {"Allow": e.headers["Allow"]} if "Allow" in e.headers else None
        return error_response(e.status, e.reason, e.text or e.reason, headers=headers)
    except Exception as e:
        logger.exception(f"Unhandled error in {request.method} {request.path}")
        return error_response(500, "Internal Server Error", str(e))


async def api_info(request: web.Request) -> web.Response:
    browser = request.app[BROWSER_KEY]
    return json_api_response(
        serialize(
            "api-info",
            {
                "id": "root",
                "api": API_NAME,
                "version": __version__,
                "endpoints": ENDPOINTS,
                "database": browser.database,
            },
        )
    )


async def list_tables(request: web.Request) -> web.Response:
    browser = request.app[BROWSER_KEY]
    tables = await browser.list_tables()
    return json_api_response(
        serialize(
            "table",
            [{"id": name, "name": name} for name in tables],
            key_case=browser.config.attribute_case,
        )
    )


async def table_data(request: web.Request) -> web.Response:
    """
    One page of a table.

    ``meta.columns`` lists the raw column names of the first row, ``id``
    included. Resource ``attributes`` carry the same columns minus the id
    column, keyed as ``attribute_keys`` maps them: converted to the configured
    case, or the raw name when two columns would convert to the same key.
    """
    browser = request.app[BROWSER_KEY]
    table_name = request.match_info["table_name"]
    page = await browser.read_table(
        table_name,
        page=request.query.get("page"),
        limit=request.query.get("limit"),
    )
    meta = {
        "tableName": table_name,
        "dbName": browser.database,
        "columns": page.columns,
        "pagination": page.result.to_meta(),
    }
    return json_api_response(
        serialize(
            table_name,
            page.rows,
            meta=meta,
            key_case=browser.config.attribute_case,
            id_offset=page.result.pagination.offset,
        )
    )


async def run_query(request: web.Request) -> web.Response:
    browser = request.app[BROWSER_KEY]
    try:
        body = await request.json()
    except ValueError:
        return error_response(400, "Bad Request", "Request body must be a JSON object")

    query = body.get("query") if isinstance(body, dict) else None
    if not isinstance(query, str) or not query.strip():
        return error_response(400, "Bad Request", "Missing 'query' in request body")

    result = await browser.run_query(query)
    meta = {"query": query, "status": result.status, "rowCount": result.row_count}
    return json_api_response(
        serialize(
            "query-result",
            result.rows,
            meta=meta,
            key_case=browser.config.attribute_case,
        )
    )


def create_app(browser: TableBrowser) -> web.Application:
    """Build the gateway application around an already constructed browser."""
    app = web.Application(middlewares=[error_middleware])
    app[BROWSER_KEY] = browser

    app.router.add_get("/api", api_info)
    app.router.add_get("/api/tables", list_tables)
    app.router.add_get("/api/tables/{table_name}", table_data)
    app.router.add_post("/api/query", run_query)

    return app
