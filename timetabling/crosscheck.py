"""Independent CP-SAT model of the same hard constraints.

Used to double-check the backtracking engines: whether an instance is
satisfiable at all, how many complete assignments it has, and whether a
returned assignment actually respects every constraint.
"""

from typing import Dict, List, Tuple

from ortools.sat.python import cp_model
from ortools.sat.python.cp_model import IntVar

from .solver import (
    CourseDict,
    RoomDict,
    SolverResultDict,
    StudentGroupDict,
    TeacherDict,
    TimeSlotDict,
    build_domains,
    expand_sessions,
)


class _SolutionCounter(cp_model.CpSolverSolutionCallback):
    def __init__(self, limit: int):
        super().__init__()
        self.limit = limit
        self.count = 0

    def on_solution_callback(self) -> None:
        self.count += 1
        if self.count >= self.limit:
            self.StopSearch()


def count_solutions(
    courses: List[CourseDict],
    teachers: List[TeacherDict],
    rooms: List[RoomDict],
    time_slots: List[TimeSlotDict],
    student_groups: List[StudentGroupDict],
    limit: int = 1000,
) -> int:
    """Number of distinct complete assignments, capped at ``limit``."""
    sessions = expand_sessions(courses)
    domain = build_domains(sessions, teachers, rooms, time_slots, student_groups)
    if any(not domain[s["id"]] for s in sessions):
        return 0
    if not sessions:
        return 1  # the empty assignment

    model = cp_model.CpModel()
    placed: Dict[Tuple[str, str, str], IntVar] = {}

    # Buckets of booleans that may hold at most one true value each
    room_buckets: Dict[Tuple[str, str], List[IntVar]] = {}
    teacher_buckets: Dict[Tuple[str, str], List[IntVar]] = {}
    group_buckets: Dict[Tuple[str, str], List[IntVar]] = {}

    for session in sessions:
        sid = session["id"]
        choices: List[IntVar] = []
        for room_id, slot_id in domain[sid]:
            var = model.NewBoolVar(f"placed_{sid}_{room_id}_{slot_id}")
            placed[(sid, room_id, slot_id)] = var
            choices.append(var)
            room_buckets.setdefault((room_id, slot_id), []).append(var)
            teacher_buckets.setdefault((session["teacher_id"], slot_id), []).append(var)
            group_buckets.setdefault((session["group_id"], slot_id), []).append(var)
        model.AddExactlyOne(choices)

    for buckets in (room_buckets, teacher_buckets, group_buckets):
        for bucket in buckets.values():
            if len(bucket) > 1:
                model.AddAtMostOne(bucket)

    solver = cp_model.CpSolver()
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_search_workers = 1  # required for enumeration
    counter = _SolutionCounter(max(1, limit))
    solver.Solve(model, counter)
    return counter.count


def is_satisfiable(
    courses: List[CourseDict],
    teachers: List[TeacherDict],
    rooms: List[RoomDict],
    time_slots: List[TimeSlotDict],
    student_groups: List[StudentGroupDict],
) -> bool:
    return count_solutions(courses, teachers, rooms, time_slots, student_groups, limit=1) > 0


def verify_solution(
    result: SolverResultDict,
    courses: List[CourseDict],
    teachers: List[TeacherDict],
    rooms: List[RoomDict],
    time_slots: List[TimeSlotDict],
    student_groups: List[StudentGroupDict],
) -> List[str]:
    """Human-readable list of violations; empty when the assignment is valid."""
    solution = result.get("solution")
    if solution is None:
        return ["no solution to verify"]

    sessions = expand_sessions(courses)
    violations: List[str] = []

    expected = {s["id"] for s in sessions}
    missing = sorted(expected - set(solution))
    extra = sorted(set(solution) - expected)
    if missing:
        violations.append(f"unassigned sessions: {', '.join(missing)}")
    if extra:
        violations.append(f"unknown sessions: {', '.join(extra)}")

    room_ids = {r["id"] for r in rooms}
    slot_ids = {t["id"] for t in time_slots}
    teacher_off = {t["id"]: set(t.get("unavailable_time_slots") or []) for t in teachers}
    group_off = {g["id"]: set(g.get("unavailable_time_slots") or []) for g in student_groups}

    seen_room: Dict[Tuple[str, str], str] = {}
    seen_teacher: Dict[Tuple[str, str], str] = {}
    seen_group: Dict[Tuple[str, str], str] = {}

    for session in sessions:
        sid = session["id"]
        if sid not in solution:
            continue
        room_id = solution[sid]["room_id"]
        slot_id = solution[sid]["time_slot_id"]

        if room_id not in room_ids:
            violations.append(f"{sid}: unknown room {room_id}")
        if slot_id not in slot_ids:
            violations.append(f"{sid}: unknown time-slot {slot_id}")
        if session["teacher_id"] not in teacher_off:
            violations.append(f"{sid}: unknown teacher {session['teacher_id']}")
        elif slot_id in teacher_off[session["teacher_id"]]:
            violations.append(f"{sid}: teacher {session['teacher_id']} unavailable at {slot_id}")
        if session["group_id"] not in group_off:
            violations.append(f"{sid}: unknown group {session['group_id']}")
        elif slot_id in group_off[session["group_id"]]:
            violations.append(f"{sid}: group {session['group_id']} unavailable at {slot_id}")

        for seen, key, what in (
            (seen_room, (room_id, slot_id), f"room {room_id}"),
            (seen_teacher, (session["teacher_id"], slot_id), f"teacher {session['teacher_id']}"),
            (seen_group, (session["group_id"], slot_id), f"group {session['group_id']}"),
        ):
            if key in seen:
                violations.append(f"{sid} and {seen[key]} share {what} at {slot_id}")
            else:
                seen[key] = sid

    return violations
