"""
Metrics tool.

get_metrics fans out to one metrics endpoint per requested metric type and
returns the time series together under the resource ID. Each type only
exists for some resource kinds, so series may legitimately come back empty.
"""

from dataclasses import dataclass
from typing import Dict

from render_mcp.client import MetricsParams, error_from_response
from render_mcp.errors import APIError
from render_mcp.session import session_from_context

from . import schemas
from .registry import mcp_tool

DEFAULT_HTTP_LATENCY_QUANTILE = 0.95


@dataclass(frozen=True)
class MetricSource:
    endpoint: str
    # A missing body is an error rather than an empty series
    required: bool = False


METRIC_SOURCES: Dict[str, MetricSource] = {
    "cpu_usage": MetricSource("cpu", required=True),
    "memory_usage": MetricSource("memory", required=True),
    "http_request_count": MetricSource("http-requests"),
    "active_connections": MetricSource("active-connections"),
    "instance_count": MetricSource("instance-count"),
    "http_latency": MetricSource("http-latency"),
    "cpu_limit": MetricSource("cpu-limit", required=True),
    "cpu_target": MetricSource("cpu-target", required=True),
    "memory_limit": MetricSource("memory-limit", required=True),
    "memory_target": MetricSource("memory-target", required=True),
}


def metrics_query(metric_type: str, params: schemas.GetMetricsParams) -> MetricsParams:
    query = MetricsParams(
        resource=params.resource_id,
        start_time=params.start_time,
        end_time=params.end_time,
        resolution_seconds=params.resolution,
    )
    if metric_type == "cpu_usage":
        query.aggregation_method = params.cpu_usage_aggregation_method
    elif metric_type == "http_request_count":
        query.aggregate_by = params.aggregate_http_request_counts_by
        query.host = params.http_host
        query.path = params.http_path
    elif metric_type == "http_latency":
        query.quantile = (
            params.http_latency_quantile
            if params.http_latency_quantile is not None
            else DEFAULT_HTTP_LATENCY_QUANTILE
        )
        query.host = params.http_host
        query.path = params.http_path
    return query


async def fetch_metric(ctx, client, metric_type: str, params: schemas.GetMetricsParams):
    source = METRIC_SOURCES[metric_type]
    resp = await client.get_metrics(ctx, source.endpoint, metrics_query(metric_type, params))

    # Latency is a paid-tier metric; Hobby workspaces get a 400
    if metric_type == "http_latency" and resp.status_code == 400:
        return []

    err = error_from_response(resp)
    if err is not None:
        raise APIError(
            f"failed to fetch {metric_type} metrics: {err}", status_code=err.status_code
        ) from err

    if resp.parsed is None:
        if source.required:
            raise APIError(
                f"failed to fetch {metric_type} metrics: empty response from the metrics API",
                status_code=resp.status_code,
            )
        return []
    return resp.parsed


@mcp_tool(
    "get_metrics",
    schemas.GetMetricsParams,
    timeout=60.0,
    title="Get resource metrics",
    read_only=True,
)
async def handle_get_metrics(ctx, client, params: schemas.GetMetricsParams):
    """
    Get performance metrics for any Render resource (services, Postgres
    databases, Key Value instances): CPU and memory usage, limits and targets,
    instance counts, HTTP request counts and latency, and database active
    connections. Returns time-series data for the requested time range. HTTP
    metrics can be filtered by host and path. Metrics may be empty if the
    metric is not valid for the given resource.
    """
    await session_from_context(ctx).get_workspace(ctx)

    metrics = []
    for metric_type in params.metric_types:
        data = await fetch_metric(ctx, client, metric_type, params)
        metrics.append({"type": metric_type, "data": data})

    time_range = {}
    if params.start_time is not None:
        time_range["start"] = params.start_time.isoformat()
    if params.end_time is not None:
        time_range["end"] = params.end_time.isoformat()

    return {"resourceId": params.resource_id, "timeRange": time_range, "metrics": metrics}
