"""Minimal deterministic OpenAPI document for the repair job API.

Covers the job blueprint and the auth endpoints; schemas stay shallow on purpose.
`x-statuses` lists every status value and `x-transitions` mirrors the optional
transition table used when ENFORCE_STATUS_TRANSITIONS is on.
"""
from typing import Any, Dict
from repair_tracker.constants.statuses import ALL_STATUSES, ALL_PRIORITIES, REPAIR_JOB_TRANSITIONS

__all__ = ["build_openapi_spec"]

_ENVELOPE = {"$ref": "#/components/schemas/Envelope"}


def _op(summary: str, secured: bool = False, body: str = None, params=None) -> Dict[str, Any]:
    op: Dict[str, Any] = {
        "summary": summary,
        "responses": {"200": {"description": "OK", "content": {"application/json": {"schema": _ENVELOPE}}}},
    }
    if secured:
        op["security"] = [{"bearerAuth": []}]
        op["responses"]["401"] = {"description": "Missing, invalid or expired token"}
        op["responses"]["403"] = {"description": "Not an active staff account"}
    if body:
        op["requestBody"] = {"required": True, "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{body}"}}}}
        op["responses"]["400"] = {"description": "Validation failed"}
    if params:
        op["parameters"] = params
    return op


def _query(name: str, schema_type: str = "string") -> Dict[str, Any]:
    return {"name": name, "in": "query", "required": False, "schema": {"type": schema_type}}


_JOB_ID = {"name": "job_id", "in": "path", "required": True, "schema": {"type": "string"}}


def build_openapi_spec() -> Dict[str, Any]:
    schemas = {
        "Envelope": {
            "type": "object",
            "properties": {"success": {"type": "boolean"}, "data": {}, "message": {"type": "string"}},
            "required": ["success"],
        },
        "RepairJob": {
            "type": "object",
            "properties": {
                "jobId": {"type": "string"},
                "status": {"type": "string", "enum": list(ALL_STATUSES)},
                "priority": {"type": "string", "enum": list(ALL_PRIORITIES)},
                "queueNumber": {"type": "integer"},
            },
            "x-statuses": list(ALL_STATUSES),
            "x-transitions": {k: sorted(v) for k, v in REPAIR_JOB_TRANSITIONS.items()},
        },
        "JobCreate": {
            "type": "object",
            "required": ["customerName", "customerPhone", "deviceModel", "problemDescription", "dropAppId"],
            "properties": {k: {"type": "string"} for k in (
                "customerName", "customerPhone", "customerEmail", "deviceModel", "deviceSerial",
                "problemDescription", "problemCategory", "priority", "dropAppId", "notes", "source",
            )},
        },
        "StatusUpdate": {
            "type": "object",
            "required": ["status"],
            "properties": {
                "status": {"type": "string", "enum": list(ALL_STATUSES)},
                "note": {"type": "string"},
                "estimatedCost": {"type": "number"},
                "actualCost": {"type": "number"},
                "aspId": {"type": "string"},
                "assignedTechnician": {"type": "string"},
            },
        },
        "Login": {
            "type": "object",
            "required": ["email", "password"],
            "properties": {"email": {"type": "string"}, "password": {"type": "string"}},
        },
    }
    list_params = [_query(n) for n in ("status", "dropAppId", "branchId", "aspId", "search")]
    list_params += [_query("page", "integer"), _query("limit", "integer")]
    paths = {
        "/api/jobs": {
            "get": _op("List repair jobs (newest first)", secured=True, params=list_params),
            "post": _op("Create a repair job", body="JobCreate"),
        },
        "/api/jobs/{job_id}": {
            "get": _op("Get a repair job (public view without staff token)", params=[_JOB_ID]),
            "put": _op("Update job status", secured=True, body="StatusUpdate", params=[_JOB_ID]),
        },
        "/api/jobs/stats/summary": {"get": _op("Aggregate job statistics")},
        "/api/jobs/queue/current": {"get": _op("Current public queue")},
        "/api/jobs/analytics/overview": {"get": _op("Staff analytics overview", secured=True)},
        "/api/jobs/analytics/daily": {"get": _op("Daily created/completed/revenue series", secured=True,
                                                 params=[_query("days", "integer")])},
        "/api/auth/login": {"post": _op("Issue an access token", body="Login")},
        "/api/auth/me": {"get": _op("Current account", secured=True)},
    }
    return {
        "openapi": "3.0.3",
        "info": {"title": "Repair Tracker API", "version": "1.0.0"},
        "paths": paths,
        "components": {
            "schemas": schemas,
            "securitySchemes": {"bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}},
        },
    }
