from typing import Any, Dict, List, Optional

from .solver import RoomDict, SolverResultDict, StudentGroupDict, TeacherDict, TimeSlotDict

DAY_ORDER = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _ordered_days(time_slots: List[TimeSlotDict]) -> List[str]:
    seen: List[str] = []
    for slot in time_slots:
        if slot["day"] not in seen:
            seen.append(slot["day"])
    known = sorted((d for d in seen if d in DAY_ORDER), key=DAY_ORDER.index)
    return known + [d for d in seen if d not in DAY_ORDER]


def _name_of(index: Dict[str, Dict[str, Any]], entity_id: Optional[str]) -> Optional[str]:
    entity = index.get(entity_id) if entity_id is not None else None
    return entity["name"] if entity else None


def build_grid(
    result: SolverResultDict,
    time_slots: List[TimeSlotDict],
    teachers: List[TeacherDict],
    rooms: List[RoomDict],
    student_groups: List[StudentGroupDict],
) -> Dict[str, Any]:
    """Lay a solver result out as day -> time -> list of placed sessions."""
    days = _ordered_days(time_slots)
    times = sorted({slot["time"] for slot in time_slots})
    cells: Dict[str, Dict[str, List[Dict[str, Optional[str]]]]] = {
        day: {t: [] for t in times} for day in days
    }

    solution = result.get("solution")
    if not solution:
        return {"days": days, "times": times, "cells": cells}

    slots_by_id = {slot["id"]: slot for slot in time_slots}
    sessions_by_id = {s["id"]: s for s in result.get("expanded_courses", [])}
    teacher_index = {t["id"]: t for t in teachers}
    room_index = {r["id"]: r for r in rooms}
    group_index = {g["id"]: g for g in student_groups}

    for session_id, placement in solution.items():
        slot = slots_by_id.get(placement["time_slot_id"])
        if slot is None:
            continue
        session = sessions_by_id.get(session_id, {})
        cells[slot["day"]][slot["time"]].append(
            {
                "session_id": session_id,
                "course_name": session.get("name"),
                "teacher_name": _name_of(teacher_index, session.get("teacher_id")),
                "room_name": _name_of(room_index, placement["room_id"]),
                "group_name": _name_of(group_index, session.get("group_id")),
            }
        )

    return {"days": days, "times": times, "cells": cells}


def load_summary(
    result: SolverResultDict,
    teachers: List[TeacherDict],
    student_groups: List[StudentGroupDict],
) -> Dict[str, List[Dict[str, Any]]]:
    """Weekly hours per teacher and per group: one hour per assigned session."""
    solution = result.get("solution") or {}
    teacher_hours: Dict[str, int] = {}
    group_hours: Dict[str, int] = {}
    for session in result.get("expanded_courses", []):
        if session["id"] not in solution:
            continue
        teacher_hours[session["teacher_id"]] = teacher_hours.get(session["teacher_id"], 0) + 1
        group_hours[session["group_id"]] = group_hours.get(session["group_id"], 0) + 1

    return {
        "teachers": [
            {"id": t["id"], "name": t["name"], "hours": teacher_hours.get(t["id"], 0)}
            for t in teachers
        ],
        "groups": [
            {"id": g["id"], "name": g["name"], "hours": group_hours.get(g["id"], 0)}
            for g in student_groups
        ],
    }
