"""Argument models for the Render tools. Field aliases are the wire names."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from render_mcp.config import get_dashboard_url


class ToolParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


Region = Literal["oregon", "frankfurt", "singapore", "ohio", "virginia"]

PAID_PLANS = ("starter", "standard", "pro", "pro_max", "pro_plus", "pro_ultra")

POSTGRES_PLANS = (
    "free",
    "basic_256mb", "basic_1gb", "basic_4gb",
    "pro_4gb", "pro_8gb", "pro_16gb", "pro_32gb", "pro_64gb", "pro_128gb",
    "pro_192gb", "pro_256gb", "pro_384gb", "pro_512gb",
    "accelerated_16gb", "accelerated_32gb", "accelerated_64gb", "accelerated_128gb",
    "accelerated_256gb", "accelerated_384gb", "accelerated_512gb", "accelerated_768gb",
    "accelerated_1024gb",
)

KEY_VALUE_PLANS = ("free", "starter", "standard", "pro", "pro_plus")


class EnvVarInput(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str = Field(..., description="The name of the environment variable")
    value: str = Field(..., description="The value of the environment variable")


# --- Workspaces ---

class ListWorkspacesParams(ToolParams):
    """List the workspaces that you have access to."""


class SelectWorkspaceParams(ToolParams):
    """Select a workspace to use for all actions."""
    owner_id: str = Field(..., alias="ownerID", description="The ID of the owner to select")


class GetSelectedWorkspaceParams(ToolParams):
    """Get the currently selected workspace."""


# --- Services ---

class ListServicesParams(ToolParams):
    """List all services in the selected workspace."""
    include_previews: bool = Field(
        default=False,
        alias="includePreviews",
        description="Whether to include preview services in the response. Defaults to false.",
    )


class GetServiceParams(ToolParams):
    """Get details about a specific service."""
    service_id: str = Field(..., alias="serviceId", description="The ID of the service to retrieve")


class CreateServiceParams(ToolParams):
    """Fields shared by every service type."""
    name: str = Field(
        ...,
        min_length=1,
        description="A unique name for your service. This will be used to generate the "
        "service's URL if it is public.",
    )
    repo: Optional[str] = Field(
        default=None,
        description="The repository containing the source code for your service. Must be a "
        "valid Git URL that Render can clone and deploy. Do not include the branch in the "
        "repo string; supply a 'branch' parameter instead.",
    )
    branch: Optional[str] = Field(
        default=None,
        description="The repository branch to deploy. If left empty, this will fall back to "
        "the default branch of the repository.",
    )
    auto_deploy: Optional[Literal["yes", "no"]] = Field(
        default=None,
        alias="autoDeploy",
        description="Whether to automatically deploy the service when the specified branch "
        "is updated. Defaults to 'yes'.",
    )
    env_vars: Optional[List[EnvVarInput]] = Field(
        default=None,
        alias="envVars",
        description="Environment variables to set for your service. These are exposed during "
        "builds and at runtime.",
    )


class CreateWebServiceParams(CreateServiceParams):
    """Create a new web service in the selected workspace."""
    runtime: Literal["node", "python", "go", "rust", "ruby", "elixir", "docker"] = Field(
        ...,
        description="The runtime environment for your service. This determines how your "
        "service is built and run.",
    )
    plan: Optional[str] = Field(
        default=None,
        description="The pricing plan for your service. Defaults to starter.",
        json_schema_extra={"enum": list(PAID_PLANS)},
    )
    build_command: str = Field(
        ...,
        alias="buildCommand",
        description="The command used to build your service. For example, 'npm run build' "
        "for Node.js or 'pip install -r requirements.txt' for Python.",
    )
    start_command: str = Field(
        ...,
        alias="startCommand",
        description="The command used to start your service. For example, 'npm start' for "
        "Node.js or 'gunicorn app:app' for Python.",
    )
    region: Optional[Region] = Field(
        default=None,
        description="The geographic region where your service will be deployed. Defaults to "
        "oregon.",
    )

    @model_validator(mode='after')
    def check_plan(self):
        if self.plan is None or self.plan in PAID_PLANS:
            return self
        if self.plan == "free":
            raise ValueError(
                "MCP server doesn't support free plans. If you're looking to create a free "
                f"service, use the dashboard at: {get_dashboard_url()}"
            )
        raise ValueError(f"invalid paid plan: {self.plan}")


class CreateStaticSiteParams(CreateServiceParams):
    """Create a new static site in the selected workspace."""
    build_command: str = Field(
        ...,
        alias="buildCommand",
        description="Render runs this command to build your app before each deploy. For "
        "example, 'yarn; yarn build' for a React app.",
    )
    publish_path: Optional[str] = Field(
        default=None,
        alias="publishPath",
        description="The relative path of the directory containing built assets to publish, "
        "for example ./build or dist. Defaults to public.",
    )


class UpdateEnvironmentVariablesParams(ToolParams):
    """Update environment variables for a service."""
    service_id: str = Field(..., alias="serviceId", description="The ID of the service to update")
    replace: bool = Field(
        default=False,
        description="Whether to replace all existing environment variables with the provided "
        "list, or merge with the existing ones. Defaults to false.",
    )
    env_vars: List[EnvVarInput] = Field(
        ...,
        alias="envVars",
        min_length=1,
        description="The list of environment variables to update or set for the service.",
    )


# --- Deploys ---

class ListDeploysParams(ToolParams):
    """List deploys for a service, one page at a time."""
    service_id: str = Field(
        ..., alias="serviceId", description="The ID of the service to get deployments for"
    )
    limit: Optional[int] = Field(
        default=None,
        ge=1,
        le=100,
        description="The maximum number of deploys to return in a single page. To fetch "
        "additional pages of results, set the cursor to the last deploy in the previous page.",
    )
    cursor: Optional[str] = Field(
        default=None,
        description="A unique string that corresponds to a position in the result list. "
        "If provided, the endpoint returns results that appear after the corresponding position.",
    )


class GetDeployParams(ToolParams):
    """Retrieve the details of a particular deploy for a particular service."""
    service_id: str = Field(..., alias="serviceId", description="The ID of the service")
    deploy_id: str = Field(..., alias="deployId", description="The ID of the deployment to retrieve")


class TriggerDeployParams(ToolParams):
    """Trigger a new deploy of an existing service."""
    service_id: str = Field(..., alias="serviceId", description="The ID of the service to deploy")
    clear_cache: bool = Field(
        default=False, alias="clearCache", description="Clear the build cache before deploying"
    )
    commit_id: Optional[str] = Field(
        default=None, alias="commitId", description="Deploy a specific commit instead of the branch head"
    )
    image_url: Optional[str] = Field(
        default=None, alias="imageUrl", description="Deploy a specific image (image-backed services only)"
    )


# --- Postgres ---

class ListPostgresParams(ToolParams):
    """List the Postgres databases in the selected workspace."""


class GetPostgresParams(ToolParams):
    """Get details about a specific Postgres database."""
    postgres_id: str = Field(..., alias="postgresId", description="The ID of the Postgres instance")


class CreatePostgresParams(ToolParams):
    """Create a new Postgres instance in the selected workspace."""
    name: str = Field(
        ..., min_length=1, description="The name of the database as it will appear in the Render Dashboard"
    )
    plan: str = Field(
        ...,
        description="Pricing plan for the database",
        json_schema_extra={"enum": list(POSTGRES_PLANS)},
    )
    region: Optional[Region] = Field(
        default=None, description="Region where the database will be deployed"
    )
    version: Optional[int] = Field(
        default=None, ge=12, le=16, description="PostgreSQL version to use (e.g., 14, 15). Defaults to 16."
    )
    disk_size_gb: Optional[int] = Field(
        default=None,
        alias="diskSizeGb",
        ge=0,
        description="Your database's capacity, in GB. You can increase storage at any time, "
        "but you can't decrease it. Specify 1 GB or any multiple of 5 GB.",
    )

    @model_validator(mode='after')
    def check_plan_and_disk(self):
        if self.plan == "custom":
            raise ValueError(
                "MCP server doesn't support custom Postgres plans. If you're looking to create "
                "a Postgres instance with a custom plan, use the dashboard at: "
                f"{get_dashboard_url()}/new/database"
            )
        if self.plan not in POSTGRES_PLANS:
            raise ValueError(f"invalid Postgres plan: {self.plan}")

        size = self.disk_size_gb
        if size is not None:
            if size not in (0, 1) and size % 5 != 0:
                raise ValueError(
                    "diskSizeGb can be 0 for the free plan, otherwise it must be either 1, "
                    "or a multiple of 5"
                )
            if self.plan == "free" and size > 0:
                raise ValueError("Free plan does not support custom disk size")
        return self


class QueryPostgresParams(ToolParams):
    """Run a read-only SQL query against a Render-hosted Postgres database."""
    postgres_id: str = Field(..., alias="postgresId", description="The ID of the Postgres instance to query")
    sql: str = Field(
        ...,
        min_length=1,
        description="The SQL query to run. The query is wrapped in a read-only transaction.",
    )


# --- Key Value ---

class ListKeyValueParams(ToolParams):
    """List the Key Value instances in the selected workspace."""


class GetKeyValueParams(ToolParams):
    """Get details about a specific Key Value instance."""
    key_value_id: str = Field(..., alias="keyValueId", description="The ID of the Key Value instance")


class CreateKeyValueParams(ToolParams):
    """Create a new Key Value instance in the selected workspace."""
    name: str = Field(..., min_length=1, description="Name of the Key Value instance")
    plan: str = Field(
        ...,
        description="Pricing plan for the Key Value instance",
        json_schema_extra={"enum": list(KEY_VALUE_PLANS)},
    )
    region: Optional[Region] = Field(
        default=None, description="Region where the Key Value instance will be deployed. Defaults to oregon."
    )
    maxmemory_policy: Optional[Literal[
        "noeviction",
        "allkeys_lfu",
        "allkeys_lru",
        "allkeys_random",
        "volatile_lfu",
        "volatile_lru",
        "volatile_random",
        "volatile_ttl",
    ]] = Field(
        default=None,
        alias="maxmemoryPolicy",
        description="The eviction policy for the Key Value store",
    )

    @model_validator(mode='after')
    def check_plan(self):
        if self.plan == "custom":
            raise ValueError(
                "MCP server doesn't support custom Key Value plans. If you're looking to create "
                "a Key Value instance with a custom plan, use the dashboard at: "
                f"{get_dashboard_url()}/new/redis"
            )
        if self.plan not in KEY_VALUE_PLANS:
            raise ValueError(f"invalid Key Value plan: {self.plan}")
        return self


# --- Logs ---

class LogFilterParams(ToolParams):
    resource: List[str] = Field(
        ...,
        min_length=1,
        description="Filter logs by their resource. A resource is the id of a server, "
        "cronjob, job, postgres, or redis.",
    )
    level: Optional[List[str]] = Field(
        default=None, description="Filter logs by their severity level. Wildcards and regex are supported."
    )
    type: Optional[List[str]] = Field(
        default=None,
        description="Filter logs by their type: app, request or build.",
    )
    instance: Optional[List[str]] = Field(
        default=None, description="Filter logs by the instance they were emitted from."
    )
    host: Optional[List[str]] = Field(
        default=None, description="Filter request logs by their host. Wildcards and regex are supported."
    )
    status_code: Optional[List[str]] = Field(
        default=None,
        alias="statusCode",
        description="Filter request logs by their status code. Wildcards and regex are supported.",
    )
    method: Optional[List[str]] = Field(
        default=None, description="Filter request logs by their request method."
    )
    path: Optional[List[str]] = Field(
        default=None, description="Filter request logs by their path. Wildcards and regex are supported."
    )
    text: Optional[List[str]] = Field(
        default=None, description="Filter by the text of the logs. Wildcards and regex are supported."
    )


class ListLogsParams(LogFilterParams):
    """
    List logs matching the provided filters. Logs are paginated by start and end
    timestamps: when hasMore is true, pass nextStartTime and nextEndTime as
    startTime and endTime to fetch the next page.
    """
    start_time: Optional[datetime] = Field(
        default=None,
        alias="startTime",
        description="Start time for the query (RFC3339). Defaults to 1 hour ago.",
    )
    end_time: Optional[datetime] = Field(
        default=None,
        alias="endTime",
        description="End time for the query (RFC3339). Defaults to the current time.",
    )
    direction: Literal["backward", "forward"] = Field(
        default="backward",
        description="Backward returns the most recent logs first; forward starts with the oldest.",
    )
    limit: Optional[int] = Field(
        default=None, ge=1, le=100, description="Maximum number of logs to return"
    )


class TailLogsParams(LogFilterParams):
    """Stream new logs for a short window and return what arrived."""
    duration_seconds: float = Field(
        default=10.0,
        alias="durationSeconds",
        gt=0,
        le=30,
        description="How long to listen for new logs, in seconds (max 30)",
    )
    max_lines: int = Field(
        default=100,
        alias="maxLines",
        ge=1,
        le=500,
        description="Stop after this many log lines",
    )


class ListLogLabelValuesParams(LogFilterParams):
    """
    List all values for a given log label in the logs matching the provided
    filters. Use it to discover values to filter list_logs by.
    """
    label: Literal["host", "instance", "level", "method", "statusCode", "type"] = Field(
        ..., description="The label to list values for."
    )
    start_time: Optional[datetime] = Field(
        default=None,
        alias="startTime",
        description="Start time for the query (RFC3339). Defaults to 1 hour ago.",
    )
    end_time: Optional[datetime] = Field(
        default=None,
        alias="endTime",
        description="End time for the query (RFC3339). Defaults to the current time.",
    )
    direction: Literal["backward", "forward"] = Field(
        default="backward",
        description="Backward returns the most recent logs first; forward starts with the oldest.",
    )


# --- Metrics ---

MetricType = Literal[
    "cpu_usage",
    "memory_usage",
    "http_request_count",
    "active_connections",
    "instance_count",
    "http_latency",
    "cpu_limit",
    "cpu_target",
    "memory_limit",
    "memory_target",
]


class GetMetricsParams(ToolParams):
    """
    Get performance metrics for any Render resource (services, Postgres
    databases, Key Value instances).
    """
    resource_id: str = Field(
        ...,
        alias="resourceId",
        description="The ID of the resource to get metrics for (service ID, Postgres ID, "
        "or Key Value ID)",
    )
    metric_types: List[MetricType] = Field(
        ...,
        alias="metricTypes",
        min_length=1,
        description="Which metrics to fetch. CPU, memory and instance count metrics are "
        "available for all resources. HTTP request counts and latency are only available "
        "for services. Active connections are only available for databases and Key Value "
        "instances. Limits show resource constraints, targets show autoscaling thresholds.",
    )
    start_time: Optional[datetime] = Field(
        default=None,
        alias="startTime",
        description="Start time for the query (RFC3339), within the last 30 days. "
        "Defaults to 1 hour ago.",
    )
    end_time: Optional[datetime] = Field(
        default=None,
        alias="endTime",
        description="End time for the query (RFC3339), within the last 30 days. "
        "Defaults to the current time.",
    )
    resolution: Optional[float] = Field(
        default=None,
        ge=30,
        description="Time resolution for data points in seconds. The API defaults to 60. "
        "If the API returns a 500, try a larger resolution.",
    )
    cpu_usage_aggregation_method: Optional[Literal["AVG", "MAX", "MIN"]] = Field(
        default=None,
        alias="cpuUsageAggregationMethod",
        description="How CPU usage values are aggregated over each interval. Defaults to AVG.",
    )
    aggregate_http_request_counts_by: Optional[Literal["host", "statusCode"]] = Field(
        default=None,
        alias="aggregateHttpRequestCountsBy",
        description="Field to aggregate http_request_count by. When not specified, returns "
        "total request counts.",
    )
    http_latency_quantile: Optional[float] = Field(
        default=None,
        alias="httpLatencyQuantile",
        ge=0.0,
        le=1.0,
        description="The quantile of HTTP latency to fetch, e.g. 0.5, 0.95 or 0.99. "
        "Defaults to 0.95.",
    )
    http_host: Optional[str] = Field(
        default=None,
        alias="httpHost",
        description="Filter HTTP metrics to a specific request host.",
    )
    http_path: Optional[str] = Field(
        default=None,
        alias="httpPath",
        description="Filter HTTP metrics to a specific request path.",
    )
