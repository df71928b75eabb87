from __future__ import annotations
from datetime import datetime
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Text, Boolean, Float, DateTime, JSON
from repair_tracker.models.authz import Base
from repair_tracker.constants.statuses import (
    STATUS_NEW_QUEUE, PRIORITY_NORMAL, DEFAULT_PROBLEM_CATEGORY, DEFAULT_WARRANTY_DAYS, LOCATION_ONLINE,
)

class RepairJob(Base):
    __tablename__ = 'repair_jobs'
    job_id: Mapped[str] = mapped_column(String(16), primary_key=True)
    customer_name: Mapped[str] = mapped_column(String(120), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    customer_email: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    device_model: Mapped[str] = mapped_column(String(120), nullable=False)
    device_serial: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    problem_description: Mapped[str] = mapped_column(Text, nullable=False)
    problem_category: Mapped[str] = mapped_column(String(32), nullable=False, default=DEFAULT_PROBLEM_CATEGORY)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=STATUS_NEW_QUEUE, index=True)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, default=PRIORITY_NORMAL)
    queue_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    estimated_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    actual_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    drop_app_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    asp_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    assigned_technician: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default='')
    source: Mapped[str] = mapped_column(String(16), nullable=False, default=LOCATION_ONLINE)
    warranty_period_days: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_WARRANTY_DAYS)
    # history entries are stored with ISO timestamps; the SQL store converts them back to datetimes
    history: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    COLUMNS = (
        'job_id', 'customer_name', 'customer_phone', 'customer_email', 'device_model', 'device_serial',
        'problem_description', 'problem_category', 'status', 'priority', 'queue_number', 'estimated_cost',
        'actual_cost', 'drop_app_id', 'asp_id', 'assigned_technician', 'notes', 'source',
        'warranty_period_days', 'history', 'is_active', 'created_at', 'updated_at', 'completed_at',
    )

# Status flow is open by default: any known status may follow any other (see constants.statuses for the
# optional transition table). completed_at is stamped the first time COMPLETED is entered.
