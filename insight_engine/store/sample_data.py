"""
Demo dataset: five departments, eleven employees, four projects.

Salary raises, performance reviews, training and a former employee are
included so every report has something to show at ``SAMPLE_AS_OF``.
"""

from __future__ import annotations

import logging
from datetime import date, time
from decimal import Decimal
from typing import Any, Dict, List

import duckdb

from .schema import initialize_store, insert_records

logger = logging.getLogger(__name__)

SAMPLE_AS_OF = date(2026, 3, 31)

Rows = List[Dict[str, Any]]


def _d(value: str) -> date:
    return date.fromisoformat(value)


def _t(value: str) -> time:
    return time.fromisoformat(value)


def _departments() -> Rows:
    return [
        {"department_id": 1, "name": "Human Resources", "manager_id": 2, "location": "New York", "budget": Decimal("150000")},
        {"department_id": 2, "name": "IT", "manager_id": 1, "location": "San Francisco", "budget": Decimal("500000")},
        {"department_id": 3, "name": "Finance", "manager_id": 4, "location": "Chicago", "budget": Decimal("500000")},
        {"department_id": 4, "name": "Marketing", "manager_id": 5, "location": "Los Angeles", "budget": Decimal("300000")},
        {"department_id": 5, "name": "Operations", "manager_id": 6, "location": "Houston", "budget": Decimal("250000")},
    ]


def _positions() -> Rows:
    rows = [
        (1, "HR Manager", 60000, 90000, 1),
        (2, "Software Developer", 70000, 120000, 2),
        (3, "System Administrator", 65000, 100000, 2),
        (4, "Accountant", 55000, 85000, 3),
        (5, "Marketing Specialist", 50000, 80000, 4),
        (6, "Operations Manager", 65000, 95000, 5),
    ]
    return [
        {
            "position_id": pid,
            "title": title,
            "min_salary": Decimal(low),
            "max_salary": Decimal(high),
            "department_id": dept,
        }
        for pid, title, low, high, dept in rows
    ]


def _employees() -> Rows:
    rows = [
        (1, "John", "Smith", "john.smith", "2022-01-10", None, "Active", 2, 2, None),
        (2, "Sarah", "Johnson", "sarah.johnson", "2021-03-15", None, "Active", 1, 1, None),
        (3, "David", "Lee", "david.lee", "2023-06-01", None, "Active", 2, 3, 1),
        (4, "Emily", "Brown", "emily.brown", "2020-11-20", None, "Active", 3, 4, None),
        (5, "Michael", "Davis", "michael.davis", "2022-09-05", None, "On Leave", 4, 5, None),
        (6, "Laura", "Wilson", "laura.wilson", "2021-07-18", None, "Active", 5, 6, None),
        (7, "Daniel", "Martinez", "daniel.m", "2022-04-12", None, "Active", 2, 2, 1),
        (8, "Sophia", "Anderson", "sophia.a", "2023-02-01", None, "Active", 2, 2, 1),
        (9, "James", "Taylor", "james.t", "2021-09-10", None, "Active", 3, 4, 4),
        (10, "Olivia", "Thomas", "olivia.t", "2020-05-25", None, "Active", 4, 5, 5),
        (11, "Grace", "Hall", "grace.h", "2024-02-01", "2025-06-30", "Resigned", 5, 6, 6),
    ]
    return [
        {
            "employee_id": eid,
            "employee_code": f"EMP{eid:03d}",
            "first_name": first,
            "last_name": last,
            "email": f"{mail}@company.com",
            "hire_date": _d(hired),
            "termination_date": _d(left) if left else None,
            "status": status,
            "department_id": dept,
            "position_id": pos,
            "manager_id": mgr,
        }
        for eid, first, last, mail, hired, left, status, dept, pos, mgr in rows
    ]


def _salary_records() -> Rows:
    rows = [
        (1, 1, 90000, "2022-01-10", "2024-12-31", "Initial Hiring"),
        (2, 1, 99000, "2025-01-01", None, "Annual Raise"),
        (3, 2, 80000, "2021-03-15", None, "Initial Hiring"),
        (4, 3, 75000, "2023-06-01", None, "Initial Hiring"),
        (5, 4, 70000, "2020-11-20", None, "Initial Hiring"),
        (6, 5, 65000, "2022-09-05", None, "Initial Hiring"),
        (7, 6, 85000, "2021-07-18", None, "Initial Hiring"),
        (8, 7, 95000, "2022-04-12", "2024-06-30", "Initial Hiring"),
        (9, 7, 104500, "2024-07-01", None, "Promotion"),
        (10, 8, 95000, "2023-02-01", None, "Initial Hiring"),
        (11, 9, 72000, "2021-09-10", None, "Initial Hiring"),
        (12, 10, 68000, "2020-05-25", "2025-02-28", "Initial Hiring"),
        (13, 10, 71400, "2025-03-01", None, "Annual Raise"),
        (14, 11, 60000, "2024-02-01", "2025-06-30", "Initial Hiring"),
    ]
    return [
        {
            "salary_id": sid,
            "employee_id": eid,
            "amount": Decimal(amount),
            "effective_from": _d(start),
            "effective_to": _d(end) if end else None,
            "change_reason": reason,
        }
        for sid, eid, amount, start, end, reason in rows
    ]


def _reviews() -> Rows:
    rows = [
        (1, 1, None, 4.0, "2023-12-15"),
        (2, 1, None, 4.5, "2024-12-15"),
        (3, 1, None, 5.0, "2025-12-15"),
        (4, 2, None, 3.5, "2024-12-15"),
        (5, 2, None, 4.0, "2025-12-15"),
        (6, 3, 1, 3.0, "2024-06-30"),
        (7, 3, 1, 5.0, "2025-06-30"),
        (8, 4, None, 4.0, "2025-12-15"),
        (9, 6, None, 3.0, "2024-12-15"),
        (10, 6, None, 3.5, "2025-12-15"),
        (11, 7, 1, 4.5, "2024-12-15"),
        (12, 7, 1, 4.5, "2025-12-15"),
        (13, 8, 1, 3.5, "2025-12-15"),
        (14, 9, 4, 2.5, "2024-12-15"),
        (15, 9, 4, 3.0, "2025-12-15"),
        (16, 10, 5, 4.0, "2024-12-15"),
        (17, 10, 5, 3.5, "2025-12-15"),
        (18, 11, 6, 3.0, "2024-12-20"),
    ]
    return [
        {
            "review_id": rid,
            "employee_id": eid,
            "reviewer_id": reviewer,
            "rating": rating,
            "review_date": _d(when),
        }
        for rid, eid, reviewer, rating, when in rows
    ]


def _projects() -> Rows:
    return [
        {"project_id": 1, "name": "Website Redesign", "budget": Decimal("100000"),
         "start_date": _d("2024-01-01"), "end_date": None, "status": "In Progress", "manager_id": 1},
        {"project_id": 2, "name": "HR System Upgrade", "budget": Decimal("80000"),
         "start_date": _d("2024-03-01"), "end_date": None, "status": "In Progress", "manager_id": 2},
        {"project_id": 3, "name": "Financial Audit 2025", "budget": Decimal("120000"),
         "start_date": _d("2025-01-01"), "end_date": None, "status": "Planned", "manager_id": 4},
        {"project_id": 4, "name": "Data Warehouse Migration", "budget": Decimal("150000"),
         "start_date": _d("2024-06-01"), "end_date": _d("2025-09-30"), "status": "Completed", "manager_id": 1},
    ]


def _assignments() -> Rows:
    rows = [
        (1, 1, 1, "Project Lead", 100, "2024-01-01", None),
        (2, 3, 1, "Backend Developer", 80, "2024-01-01", None),
        (3, 2, 2, "HR Lead", 100, "2024-03-01", None),
        (4, 4, 3, "Financial Analyst", 100, "2025-01-01", None),
        (5, 7, 1, "Frontend Developer", 70, "2024-01-01", None),
        (6, 8, 1, "UI Developer", 60, "2024-01-01", None),
        (7, 1, 2, "Technical Advisor", 40, "2024-03-01", None),
        (8, 9, 3, "Audit Support", 100, "2025-01-01", None),
        (9, 6, 4, "Process Analyst", 50, "2024-06-01", "2025-09-30"),
        (10, 3, 4, "Data Engineer", 50, "2024-06-01", "2025-09-30"),
        (11, 9, 4, "Finance Liaison", 30, "2024-07-01", "2025-09-30"),
    ]
    return [
        {
            "assignment_id": aid,
            "employee_id": eid,
            "project_id": pid,
            "role_name": role,
            "allocation_percent": float(alloc),
            "assigned_on": _d(start),
            "released_on": _d(end) if end else None,
        }
        for aid, eid, pid, role, alloc, start, end in rows
    ]


def _training_programs() -> Rows:
    return [
        {"program_id": 1, "name": "Cloud Fundamentals", "cost": Decimal("1200"), "duration_hours": 24.0},
        {"program_id": 2, "name": "Leadership Essentials", "cost": Decimal("2500"), "duration_hours": 16.0},
        {"program_id": 3, "name": "Financial Compliance", "cost": Decimal("800"), "duration_hours": 8.0},
        {"program_id": 4, "name": "Data Privacy", "cost": Decimal("300"), "duration_hours": 4.0},
    ]


def _training_records() -> Rows:
    rows = [
        (1, 1, 1, "Completed", 90.0, "2023-11-30"),
        (2, 3, 1, "Completed", 88.0, "2024-09-30"),
        (3, 7, 1, "Completed", 92.0, "2024-10-15"),
        (4, 8, 1, "In Progress", None, None),
        (5, 1, 2, "Completed", 95.0, "2024-05-20"),
        (6, 2, 2, "Completed", 85.0, "2024-06-10"),
        (7, 6, 2, "Completed", 78.0, "2025-02-14"),
        (8, 4, 3, "Completed", 90.0, "2025-03-20"),
        (9, 9, 3, "Completed", 81.0, "2025-04-01"),
        (10, 1, 3, "Completed", 87.0, "2025-06-01"),
        (11, 10, 3, "Dropped", None, None),
    ]
    return [
        {
            "record_id": rid,
            "employee_id": eid,
            "program_id": pid,
            "status": status,
            "score": score,
            "completion_date": _d(done) if done else None,
        }
        for rid, eid, pid, status, score, done in rows
    ]


def _leave_requests() -> Rows:
    rows = [
        (1, 3, "Sick", "2026-02-18", "2026-02-20", "Flu recovery", "Approved", 1),
        (2, 5, "Casual", "2026-03-05", "2026-03-07", "Family event", "Pending", None),
        (3, 1, "Earned", "2025-08-04", "2025-08-08", "Vacation", "Approved", 2),
        (4, 9, "Sick", "2025-11-10", "2025-11-11", "Medical appointment", "Approved", 4),
    ]
    return [
        {
            "leave_id": lid,
            "employee_id": eid,
            "leave_type": kind,
            "start_date": _d(start),
            "end_date": _d(end),
            "reason": reason,
            "approval_status": status,
            "approved_by": approver,
        }
        for lid, eid, kind, start, end, reason, status, approver in rows
    ]


def _attendance() -> Rows:
    rows = [
        (1, 1, "2026-02-18", "09:00:00", "17:00:00", "Present"),
        (2, 2, "2026-02-18", "09:15:00", "17:05:00", "Present"),
        (3, 3, "2026-02-18", None, None, "Leave"),
        (4, 4, "2026-02-18", "08:55:00", "16:50:00", "Present"),
        (5, 7, "2026-02-18", "09:05:00", "17:10:00", "Present"),
        (6, 8, "2026-02-18", "09:20:00", "17:00:00", "Present"),
        (7, 9, "2026-02-18", None, None, "Absent"),
        (8, 10, "2026-02-18", "08:50:00", "16:45:00", "Present"),
        (9, 1, "2026-02-19", "08:58:00", "17:02:00", "Present"),
        (10, 3, "2026-02-19", None, None, "Leave"),
        (11, 9, "2026-02-19", "09:10:00", "17:00:00", "Present"),
    ]
    return [
        {
            "attendance_id": aid,
            "employee_id": eid,
            "attendance_date": _d(day),
            "status": status,
            "check_in": _t(check_in) if check_in else None,
            "check_out": _t(check_out) if check_out else None,
        }
        for aid, eid, day, check_in, check_out, status in rows
    ]


def sample_records() -> Dict[str, Rows]:
    """Plain row dicts keyed by snapshot collection name."""
    return {
        "departments": _departments(),
        "positions": _positions(),
        "employees": _employees(),
        "salary_records": _salary_records(),
        "reviews": _reviews(),
        "projects": _projects(),
        "assignments": _assignments(),
        "training_programs": _training_programs(),
        "training_records": _training_records(),
        "leave_requests": _leave_requests(),
        "attendance": _attendance(),
    }


def load_sample_data(conn: duckdb.DuckDBPyConnection, fresh: bool = True) -> Dict[str, int]:
    """Create the snapshot tables and insert the demo dataset."""
    initialize_store(conn, fresh=fresh)
    inserted = insert_records(conn, sample_records())
    logger.info(f"Loaded sample data: {sum(inserted.values())} rows")
    return inserted
