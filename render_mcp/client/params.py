"""
Query parameters for Render API list endpoints.

Every paginated parameter set implements ``set_cursor`` / ``set_limit`` so
it can be driven by ``pagination.list_all``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

QueryParams = List[Tuple[str, str]]


def _add(query: QueryParams, name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            query.append((name, str(item)))
    elif isinstance(value, bool):
        query.append((name, "true" if value else "false"))
    elif isinstance(value, datetime):
        query.append((name, value.isoformat()))
    else:
        query.append((name, str(value)))


@dataclass
class CursorParams:
    cursor: Optional[str] = None
    limit: Optional[int] = None

    def set_cursor(self, cursor: Optional[str]) -> None:
        self.cursor = cursor

    def set_limit(self, limit: int) -> None:
        self.limit = limit

    def _filters(self) -> Dict[str, Any]:
        return {}

    def to_query(self) -> QueryParams:
        query: QueryParams = []
        for name, value in self._filters().items():
            _add(query, name, value)
        _add(query, "cursor", self.cursor or None)
        _add(query, "limit", self.limit)
        return query


@dataclass
class ListOwnersParams(CursorParams):
    name: Optional[List[str]] = None
    email: Optional[List[str]] = None

    def _filters(self) -> Dict[str, Any]:
        return {"name": self.name, "email": self.email}


@dataclass
class ListServicesParams(CursorParams):
    owner_id: Optional[List[str]] = None
    name: Optional[List[str]] = None
    type: Optional[List[str]] = None
    include_previews: Optional[bool] = None

    def _filters(self) -> Dict[str, Any]:
        return {
            "ownerId": self.owner_id,
            "name": self.name,
            "type": self.type,
            "includePreviews": self.include_previews,
        }


@dataclass
class ListDeploysParams(CursorParams):
    status: Optional[List[str]] = None

    def _filters(self) -> Dict[str, Any]:
        return {"status": self.status}


@dataclass
class ListEnvVarsParams(CursorParams):
    pass


@dataclass
class ListPostgresParams(CursorParams):
    owner_id: Optional[List[str]] = None
    name: Optional[List[str]] = None

    def _filters(self) -> Dict[str, Any]:
        return {"ownerId": self.owner_id, "name": self.name}


@dataclass
class ListKeyValueParams(CursorParams):
    owner_id: Optional[List[str]] = None
    name: Optional[List[str]] = None

    def _filters(self) -> Dict[str, Any]:
        return {"ownerId": self.owner_id, "name": self.name}


@dataclass
class ListLogsParams:
    """Logs paginate by time window, not cursor."""

    owner_id: str
    resource: List[str]
    level: Optional[List[str]] = None
    type: Optional[List[str]] = None
    instance: Optional[List[str]] = None
    host: Optional[List[str]] = None
    status_code: Optional[List[str]] = None
    method: Optional[List[str]] = None
    path: Optional[List[str]] = None
    text: Optional[List[str]] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    direction: Optional[str] = None
    limit: Optional[int] = None

    def to_query(self) -> QueryParams:
        query: QueryParams = []
        for name, value in (
            ("ownerId", self.owner_id),
            ("resource", self.resource),
            ("level", self.level),
            ("type", self.type),
            ("instance", self.instance),
            ("host", self.host),
            ("statusCode", self.status_code),
            ("method", self.method),
            ("path", self.path),
            ("text", self.text),
            ("startTime", self.start_time),
            ("endTime", self.end_time),
            ("direction", self.direction),
            ("limit", self.limit),
        ):
            _add(query, name, value)
        return query


@dataclass
class ListLogLabelValuesParams(ListLogsParams):
    label: str = ""

    def to_query(self) -> QueryParams:
        return [("label", self.label)] + super().to_query()


@dataclass
class MetricsParams:
    """Query for one metrics endpoint; unset fields are left out."""

    resource: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    resolution_seconds: Optional[float] = None
    aggregation_method: Optional[str] = None
    aggregate_by: Optional[str] = None
    quantile: Optional[float] = None
    host: Optional[str] = None
    path: Optional[str] = None

    def to_query(self) -> QueryParams:
        query: QueryParams = []
        for name, value in (
            ("resource", self.resource),
            ("startTime", self.start_time),
            ("endTime", self.end_time),
            ("resolutionSeconds", self.resolution_seconds),
            ("aggregationMethod", self.aggregation_method),
            ("aggregateBy", self.aggregate_by),
            ("quantile", self.quantile),
            ("host", self.host),
            ("path", self.path),
        ):
            _add(query, name, value)
        return query
