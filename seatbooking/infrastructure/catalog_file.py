from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from seatbooking.domain.entities.coupon import Promotion
from seatbooking.domain.entities.fee import AdditionalFee
from seatbooking.domain.entities.inventory import Branch, InventorySnapshot, Locker, Seat
from seatbooking.domain.entities.plan import Plan
from seatbooking.domain.entities.student import Student


def load_catalog(path: str | Path) -> dict[str, Any]:
    """Read the catalogue fixture. A missing file is an empty catalogue."""
    file_path = Path(path)
    if not path or not file_path.is_file():
        return {}
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def deserialize_snapshot(data: dict[str, Any]) -> InventorySnapshot:
    branch = Branch(
        id=str(data["id"]),
        name=data.get("name", ""),
        address=data.get("address"),
        city=data.get("city") or "",
        phone=data.get("phone"),
        has_lockers=bool(data.get("has_lockers", False)),
        is_locker_separate=bool(data.get("is_locker_separate", False)),
    )
    return InventorySnapshot(
        branch=branch,
        plans=[deserialize_plan(p) for p in data.get("plans", [])],
        fees=[deserialize_fee(f) for f in data.get("fees", [])],
        seats=[
            Seat(
                id=str(s["id"]),
                number=str(s["number"]),
                section=s.get("section"),
                is_occupied=bool(s.get("is_occupied", False)),
            )
            for s in data.get("seats", [])
        ],
        lockers=[
            Locker(id=str(lk["id"]), number=str(lk["number"]), is_occupied=bool(lk.get("is_occupied", False)))
            for lk in data.get("lockers", [])
        ],
    )


def deserialize_plan(data: dict[str, Any]) -> Plan:
    return Plan(
        id=str(data["id"]),
        name=data.get("name", ""),
        price=data.get("price", 0),
        duration=int(data.get("duration", 1)),
        duration_unit=data.get("duration_unit", "months"),
        category=data.get("category", "fixed"),
        billing_cycle=data.get("billing_cycle", "one_time"),
        shift_start=data.get("shift_start"),
        shift_end=data.get("shift_end"),
        hours_per_day=data.get("hours_per_day"),
        includes_seat=bool(data.get("includes_seat", False)),
        includes_locker=bool(data.get("includes_locker", False)),
        description=data.get("description"),
    )


def deserialize_fee(data: dict[str, Any]) -> AdditionalFee:
    return AdditionalFee(
        id=str(data["id"]),
        name=data.get("name", ""),
        amount=data.get("amount", 0),
        type=data.get("type"),
        description=data.get("description"),
        kind=data.get("kind"),
    )


def deserialize_promotion(data: dict[str, Any]) -> Promotion:
    start_date = datetime.fromisoformat(data["start_date"]) if data.get("start_date") else None
    end_date = datetime.fromisoformat(data["end_date"]) if data.get("end_date") else None
    return Promotion(
        code=data["code"],
        discount_type=data.get("discount_type", "fixed"),
        value=data.get("value", 0),
        start_date=start_date,
        end_date=end_date,
        is_active=bool(data.get("is_active", True)),
        min_order_value=data.get("min_order_value"),
        max_discount=data.get("max_discount"),
        usage_limit=data.get("usage_limit"),
        used_count=int(data.get("used_count", 0)),
        branch_id=data.get("branch_id"),
        plan_id=data.get("plan_id"),
        description=data.get("description"),
    )


def deserialize_student(data: dict[str, Any]) -> Student:
    return Student(id=str(data["id"]), name=data.get("name", ""), email=data.get("email"), phone=data.get("phone"))
