"""
Log tools: windowed queries (list_logs), label discovery (list_log_label_values)
and short live tails (tail_logs).

LogTail owns one websocket subscription. A background task reads frames
into a queue and, on every exit path, closes the socket and enqueues an
end-of-stream marker, so consumers never block on a dead stream.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Optional

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidStatus

from render_mcp.client import ListLogLabelValuesParams, ListLogsParams, raise_for_response
from render_mcp.errors import APIError, BackendUnavailableError
from render_mcp.logging_utils import get_logger
from render_mcp.session import session_from_context

from . import schemas
from .registry import mcp_tool

logger = get_logger(__name__)

_END_OF_STREAM = object()


class LogTail:
    """
    Usage:
        tail = LogTail(url, headers)
        await tail.start()
        try:
            async for log in tail:
                ...
        finally:
            await tail.aclose()
    """

    def __init__(self, url: str, headers: Any, *, connect: Optional[Callable] = None):
        self.url = url
        self.headers = headers
        self._connect = connect or ws_connect
        self._queue: asyncio.Queue = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None
        self._error: Optional[BaseException] = None

    async def start(self) -> None:
        try:
            conn = await self._connect(self.url, additional_headers=list(self.headers.items()))
        except InvalidStatus as e:
            response = e.response
            body = response.body.decode("utf-8", errors="replace") if response.body else ""
            raise APIError(
                f"failed to tail logs: {body or response.reason_phrase}",
                status_code=response.status_code,
            ) from e
        except (InvalidHandshake, OSError) as e:
            raise BackendUnavailableError(f"failed to tail logs: {e}") from e

        self._task = asyncio.create_task(self._pump(conn))

    async def _pump(self, conn) -> None:
        try:
            async for message in conn:
                try:
                    log = json.loads(message)
                except ValueError:
                    logger.debug(f"Dropping undecodable log frame: {message!r:.80}")
                    continue
                self._queue.put_nowait(log)
        except ConnectionClosed as e:
            logger.debug(f"Log stream closed: {e}")
        except Exception as e:
            logger.warning(f"Log stream failed: {e}")
            self._error = e
        finally:
            try:
                await conn.close()
            finally:
                self._queue.put_nowait(_END_OF_STREAM)

    def __aiter__(self):
        return self

    async def __anext__(self) -> Any:
        item = await self._queue.get()
        if item is _END_OF_STREAM:
            # Keep the marker so repeated iteration also ends
            self._queue.put_nowait(_END_OF_STREAM)
            if self._error is not None:
                raise BackendUnavailableError(f"log stream failed: {self._error}") from self._error
            raise StopAsyncIteration
        return item

    async def aclose(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass


async def _logs_params(
    ctx, params: schemas.LogFilterParams, query_cls=ListLogsParams, **extra
) -> ListLogsParams:
    owner_id = await session_from_context(ctx).get_workspace(ctx)
    return query_cls(
        owner_id=owner_id,
        resource=params.resource,
        level=params.level,
        type=params.type,
        instance=params.instance,
        host=params.host,
        status_code=params.status_code,
        method=params.method,
        path=params.path,
        text=params.text,
        **extra,
    )


@mcp_tool(
    "list_logs",
    schemas.ListLogsParams,
    title="List logs",
    read_only=True,
    idempotent=True,
)
async def handle_list_logs(ctx, client, params: schemas.ListLogsParams):
    """
    List logs matching the provided filters. Logs are paginated by start and
    end timestamps. There are more logs to fetch if hasMore is true in the
    response; pass nextStartTime and nextEndTime as startTime and endTime to
    fetch the next page. All resources must be in the same region and belong
    to the same owner.
    """
    query = await _logs_params(
        ctx,
        params,
        start_time=params.start_time,
        end_time=params.end_time,
        direction=params.direction,
        limit=params.limit,
    )
    resp = await client.list_logs(ctx, query)
    raise_for_response(resp)
    return resp.parsed


@mcp_tool(
    "list_log_label_values",
    schemas.ListLogLabelValuesParams,
    title="List log label values",
    read_only=True,
    idempotent=True,
)
async def handle_list_log_label_values(ctx, client, params: schemas.ListLogLabelValuesParams):
    """
    List all values for a given log label in the logs matching the provided
    filters. Use it to discover what values are available for filtering logs
    with list_logs. All resources must be in the same region and belong to
    the same owner.
    """
    query = await _logs_params(
        ctx,
        params,
        query_cls=ListLogLabelValuesParams,
        label=params.label,
        start_time=params.start_time,
        end_time=params.end_time,
        direction=params.direction,
    )
    resp = await client.list_log_label_values(ctx, query)
    raise_for_response(resp)
    return resp.parsed


@mcp_tool(
    "tail_logs",
    schemas.TailLogsParams,
    timeout=45.0,
    title="Tail logs",
    read_only=True,
)
async def handle_tail_logs(ctx, client, params: schemas.TailLogsParams):
    """
    Stream new logs matching the provided filters for a short window
    (durationSeconds) and return the logs that arrived.
    """
    query = await _logs_params(ctx, params)
    tail = LogTail(client.subscribe_logs_url(query), client.auth_headers(ctx))
    await tail.start()

    logs = []

    async def collect():
        async for log in tail:
            logs.append(log)
            if len(logs) >= params.max_lines:
                return

    try:
        await asyncio.wait_for(collect(), timeout=params.duration_seconds)
    except asyncio.TimeoutError:
        logger.debug(f"Tail window of {params.duration_seconds}s elapsed")
    finally:
        await tail.aclose()

    return {"logs": logs, "count": len(logs)}
