"""Input structs for the job operations.

Request bodies and query strings are parsed into these dataclasses at the API boundary;
the lifecycle services only ever see validated, well-typed values.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from repair_tracker.config.pagination import normalize_pagination
from repair_tracker.constants.statuses import (
    ALL_PRIORITIES, ALL_STATUSES, DEFAULT_PROBLEM_CATEGORY, LOCATION_API, LOCATION_ONLINE, PRIORITY_NORMAL,
)
from repair_tracker.errors import ValidationError
from repair_tracker.utils.validation import (
    EMAIL_RE, is_thai_mobile, normalize_phone, optional_amount, optional_text, raise_if_errors, require_text,
    validate_choice,
)


@dataclass(frozen=True)
class JobCreateInput:
    customer_name: str
    customer_phone: str
    device_model: str
    problem_description: str
    drop_app_id: str
    customer_email: Optional[str] = None
    device_serial: Optional[str] = None
    problem_category: str = DEFAULT_PROBLEM_CATEGORY
    priority: str = PRIORITY_NORMAL
    notes: str = ''
    source: str = LOCATION_ONLINE

    @classmethod
    def from_payload(cls, data: Optional[Mapping[str, Any]]) -> 'JobCreateInput':
        data = dict(data or {})
        errors = []
        name = require_text(data, 'customerName', 'customerName', 'Customer name is required', errors)
        phone = require_text(data, 'customerPhone', 'customerPhone', 'Valid Thai phone number required', errors)
        if phone is not None and not is_thai_mobile(phone):
            errors.append({'field': 'customerPhone', 'message': 'Valid Thai phone number required'})
        model = require_text(data, 'deviceModel', 'deviceModel', 'Device model is required', errors)
        problem = require_text(data, 'problemDescription', 'problemDescription', 'Problem description is required', errors)
        drop_app_id = require_text(data, 'dropAppId', 'dropAppId', 'Drop-APP ID is required', errors)
        email = optional_text(data, 'customerEmail', 'customerEmail', errors)
        if email is not None and not EMAIL_RE.match(email):
            errors.append({'field': 'customerEmail', 'message': 'customerEmail invalid'})
        serial = optional_text(data, 'deviceSerial', 'deviceSerial', errors)
        category = optional_text(data, 'problemCategory', 'problemCategory', errors) or DEFAULT_PROBLEM_CATEGORY
        priority = optional_text(data, 'priority', 'priority', errors) or PRIORITY_NORMAL
        validate_choice(priority, ALL_PRIORITIES, 'priority', errors)
        notes = optional_text(data, 'notes', 'notes', errors) or ''
        source = optional_text(data, 'source', 'source', errors) or LOCATION_ONLINE
        raise_if_errors(errors)
        return cls(
            customer_name=name,
            customer_phone=normalize_phone(phone),
            device_model=model,
            problem_description=problem,
            drop_app_id=drop_app_id,
            customer_email=email,
            device_serial=serial,
            problem_category=category,
            priority=priority,
            notes=notes,
            source=source,
        )


@dataclass(frozen=True)
class StatusUpdateInput:
    status: str
    note: Optional[str] = None
    location: str = LOCATION_API
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    asp_id: Optional[str] = None
    assigned_technician: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Optional[Mapping[str, Any]]) -> 'StatusUpdateInput':
        data = dict(data or {})
        errors = []
        status = require_text(data, 'status', 'status', 'Status is required', errors)
        if status is not None:
            validate_choice(status, ALL_STATUSES, 'status', errors)
        note = optional_text(data, 'note', 'note', errors)
        location = optional_text(data, 'location', 'location', errors) or LOCATION_API
        estimated = optional_amount(data, 'estimatedCost', 'estimatedCost', errors)
        actual = optional_amount(data, 'actualCost', 'actualCost', errors)
        asp_id = optional_text(data, 'aspId', 'aspId', errors)
        technician = optional_text(data, 'assignedTechnician', 'assignedTechnician', errors)
        raise_if_errors(errors)
        return cls(
            status=status,
            note=note,
            location=location,
            estimated_cost=estimated,
            actual_cost=actual,
            asp_id=asp_id,
            assigned_technician=technician,
        )


@dataclass(frozen=True)
class JobFilters:
    status: Optional[str] = None
    drop_app_id: Optional[str] = None
    asp_id: Optional[str] = None
    search: Optional[str] = None
    page: int = 1
    limit: int = 20

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> 'JobFilters':
        try:
            page, limit = normalize_pagination(args.get('page'), args.get('limit'))
        except ValueError as e:
            raise ValidationError.single('page', str(e))
        status = args.get('status') or None
        # the dashboard sends "all" to mean no status filter
        if status == 'all':
            status = None
        if status is not None and status not in ALL_STATUSES:
            raise ValidationError.single('status', 'status invalid')
        return cls(
            status=status,
            drop_app_id=args.get('dropAppId') or args.get('branchId') or None,
            asp_id=args.get('aspId') or None,
            search=(args.get('search') or '').strip() or None,
            page=page,
            limit=limit,
        )

    def store_filters(self) -> Dict[str, Any]:
        filters: Dict[str, Any] = {}
        if self.status:
            filters['status'] = self.status
        if self.drop_app_id:
            filters['drop_app_id'] = self.drop_app_id
        if self.asp_id:
            filters['asp_id'] = self.asp_id
        return filters


__all__ = ['JobCreateInput', 'StatusUpdateInput', 'JobFilters']
