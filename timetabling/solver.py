import logging
import time
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple, TypedDict

logger = logging.getLogger(__name__)

BACKTRACKING_HEURISTICS = "BACKTRACKING_HEURISTICS"
FORWARD_CHECKING = "FORWARD_CHECKING"
ALGORITHMS = (BACKTRACKING_HEURISTICS, FORWARD_CHECKING)

SOLVED = "SOLVED"
UNSATISFIABLE = "UNSATISFIABLE"


class CourseDict(TypedDict):
    id: str
    name: str
    teacher_id: str
    group_id: str
    hours: int


class TeacherDict(TypedDict, total=False):
    id: str
    name: str
    unavailable_time_slots: List[str]


class RoomDict(TypedDict):
    id: str
    name: str
    capacity: int  # carried through, never checked


class TimeSlotDict(TypedDict):
    id: str
    day: str
    time: str


class StudentGroupDict(TypedDict, total=False):
    id: str
    name: str
    size: int  # carried through, never checked
    unavailable_time_slots: List[str]


# One hour of one course: the variable of the CSP.
class SessionDict(TypedDict):
    id: str
    name: str
    course_id: str
    hour: int
    teacher_id: str
    group_id: str


class PlacementDict(TypedDict):
    room_id: str
    time_slot_id: str


class StatsDict(TypedDict):
    time_taken_ms: float
    nodes_visited: int


class SolverResultDict(TypedDict):
    status: str  # "SOLVED" or "UNSATISFIABLE"
    algorithm: str
    solution: Optional[Dict[str, PlacementDict]]
    stats: StatsDict
    expanded_courses: List[SessionDict]


# (room_id, time_slot_id)
Value = Tuple[str, str]
# Candidate sequences are tuples so a branch can share them without aliasing risk.
Domain = Dict[str, Tuple[Value, ...]]
Assignment = Dict[str, Value]


@dataclass
class SearchContext:
    """Per-solve lookup tables plus the node counter threaded through the search."""

    sessions: List[SessionDict]
    sessions_by_id: Dict[str, SessionDict]
    teacher_unavailable: Dict[str, FrozenSet[str]]
    group_unavailable: Dict[str, FrozenSet[str]]
    nodes_visited: int = field(default=0)

    @classmethod
    def build(
        cls,
        sessions: List[SessionDict],
        teachers: List[TeacherDict],
        student_groups: List[StudentGroupDict],
    ) -> "SearchContext":
        return cls(
            sessions=sessions,
            sessions_by_id={s["id"]: s for s in sessions},
            teacher_unavailable=_unavailability_index(teachers),
            group_unavailable=_unavailability_index(student_groups),
        )


def _unavailability_index(entities) -> Dict[str, FrozenSet[str]]:
    # First occurrence wins for duplicated ids, like a linear lookup would.
    index: Dict[str, FrozenSet[str]] = {}
    for entity in entities:
        if entity["id"] not in index:
            index[entity["id"]] = frozenset(entity.get("unavailable_time_slots") or ())
    return index


# ---------- Session expansion ----------

def expand_sessions(courses: List[CourseDict]) -> List[SessionDict]:
    """Split every course into one-hour sessions, in course order then hour order."""
    sessions: List[SessionDict] = []
    for course in courses:
        hours = int(course["hours"])
        for hour in range(1, hours + 1):
            sessions.append(
                {
                    "id": f"{course['id']}_{hour}",
                    "name": f"{course['name']} ({hour}/{hours})" if hours > 1 else course["name"],
                    "course_id": course["id"],
                    "hour": hour,
                    "teacher_id": course["teacher_id"],
                    "group_id": course["group_id"],
                }
            )
    return sessions


# ---------- Domain initialization ----------

def build_domains(
    sessions: List[SessionDict],
    teachers: List[TeacherDict],
    rooms: List[RoomDict],
    time_slots: List[TimeSlotDict],
    student_groups: List[StudentGroupDict],
) -> Domain:
    """Candidate (room, time-slot) pairs per session after unary filtering.

    Rooms are the outer loop and time-slots the inner one, both in input
    order. A session whose teacher or group does not exist gets an empty
    domain, which makes the instance unsatisfiable rather than raising.
    """
    teacher_unavailable = _unavailability_index(teachers)
    group_unavailable = _unavailability_index(student_groups)
    all_values: List[Value] = [(room["id"], slot["id"]) for room in rooms for slot in time_slots]

    domain: Domain = {}
    for session in sessions:
        blocked_by_teacher = teacher_unavailable.get(session["teacher_id"])
        blocked_by_group = group_unavailable.get(session["group_id"])
        if blocked_by_teacher is None or blocked_by_group is None:
            domain[session["id"]] = ()
            continue
        blocked = blocked_by_teacher | blocked_by_group
        domain[session["id"]] = tuple(v for v in all_values if v[1] not in blocked)
    return domain


# ---------- Consistency ----------

def is_consistent(
    session_id: str,
    value: Value,
    assignment: Assignment,
    ctx: SearchContext,
) -> bool:
    """True if placing ``session_id`` at ``value`` breaks no constraint."""
    session = ctx.sessions_by_id[session_id]
    room_id, slot_id = value

    if slot_id in ctx.teacher_unavailable.get(session["teacher_id"], frozenset()):
        return False
    if slot_id in ctx.group_unavailable.get(session["group_id"], frozenset()):
        return False

    for other_id, (other_room, other_slot) in assignment.items():
        if other_id == session_id:
            continue
        if other_slot != slot_id:
            continue  # every binary constraint needs the same time-slot
        if other_room == room_id:
            return False
        other = ctx.sessions_by_id[other_id]
        if other["teacher_id"] == session["teacher_id"]:
            return False
        if other["group_id"] == session["group_id"]:
            return False

    return True


# ---------- Variable selection ----------

def select_unassigned_session(
    assignment: Assignment, domain: Domain, ctx: SearchContext
) -> Optional[str]:
    """Minimum remaining values; ties go to the earliest session in the list."""
    best_id: Optional[str] = None
    best_size = None
    for session in ctx.sessions:
        sid = session["id"]
        if sid in assignment:
            continue
        size = len(domain[sid])
        if best_size is None or size < best_size:
            best_id, best_size = sid, size
    return best_id


# ---------- Strategy A ----------

def backtracking_search(
    assignment: Assignment, domain: Domain, ctx: SearchContext
) -> Optional[Assignment]:
    session_id = select_unassigned_session(assignment, domain, ctx)
    if session_id is None:
        return dict(assignment)
    ctx.nodes_visited += 1

    for value in domain[session_id]:
        if not is_consistent(session_id, value, assignment, ctx):
            continue
        assignment[session_id] = value
        result = backtracking_search(assignment, domain, ctx)
        if result is not None:
            return result
        del assignment[session_id]
    return None


# ---------- Strategy B ----------

def forward_check(
    session_id: str,
    value: Value,
    assignment: Assignment,
    domain: Domain,
    ctx: SearchContext,
) -> Optional[Domain]:
    """Prune every other unassigned session against ``session_id := value``.

    Returns a new mapping for the child branch, or None as soon as some
    session is left with no candidates. ``domain`` itself is never touched.
    """
    current = ctx.sessions_by_id[session_id]
    slot_id = value[1]
    pruned: Domain = dict(domain)

    for other in ctx.sessions:
        other_id = other["id"]
        if other_id == session_id or other_id in assignment:
            continue
        shares_slot_owner = (
            other["teacher_id"] == current["teacher_id"]
            or other["group_id"] == current["group_id"]
        )
        kept = tuple(
            v for v in domain[other_id]
            if v != value and not (shares_slot_owner and v[1] == slot_id)
        )
        if not kept:
            return None
        pruned[other_id] = kept

    return pruned


def forward_checking_search(
    assignment: Assignment, domain: Domain, ctx: SearchContext
) -> Optional[Assignment]:
    session_id = select_unassigned_session(assignment, domain, ctx)
    if session_id is None:
        return dict(assignment)
    ctx.nodes_visited += 1

    for value in domain[session_id]:
        if not is_consistent(session_id, value, assignment, ctx):
            continue
        assignment[session_id] = value
        child_domain = forward_check(session_id, value, assignment, domain, ctx)
        if child_domain is not None:
            result = forward_checking_search(assignment, child_domain, ctx)
            if result is not None:
                return result
        del assignment[session_id]
    return None


_STRATEGIES = {
    BACKTRACKING_HEURISTICS: backtracking_search,
    FORWARD_CHECKING: forward_checking_search,
}


# ---------- Entry point ----------

def solve(
    algorithm: str,
    courses: List[CourseDict],
    teachers: List[TeacherDict],
    rooms: List[RoomDict],
    time_slots: List[TimeSlotDict],
    student_groups: List[StudentGroupDict],
) -> SolverResultDict:
    """Place every session of every course into a (room, time-slot) pair.

    Hard constraints:
      • No two sessions in the same room at the same time-slot.
      • No teacher or student group in two sessions at the same time-slot.
      • No session at a time-slot its teacher or group marked unavailable.

    Room capacity and group size are carried through but never compared.

    Returns:
    - A dictionary with status, the assignment (None when unsatisfiable),
      search telemetry and the expanded session list.
    """
    search = _STRATEGIES.get(algorithm)
    if search is None:
        raise ValueError(f"Unknown algorithm {algorithm!r}; expected one of {', '.join(ALGORITHMS)}")

    sessions = expand_sessions(courses)
    domain = build_domains(sessions, teachers, rooms, time_slots, student_groups)
    ctx = SearchContext.build(sessions, teachers, student_groups)

    logger.info("Solving %d session(s) with %s", len(sessions), algorithm)
    if logger.isEnabledFor(logging.DEBUG):
        for sid, values in domain.items():
            logger.debug("Domain %s: %d candidate(s)", sid, len(values))

    start = time.perf_counter()
    found = search({}, domain, ctx)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    solution: Optional[Dict[str, PlacementDict]] = None
    if found is not None:
        solution = {
            s["id"]: {"room_id": found[s["id"]][0], "time_slot_id": found[s["id"]][1]}
            for s in sessions
        }

    result: SolverResultDict = {
        "status": SOLVED if solution is not None else UNSATISFIABLE,
        "algorithm": algorithm,
        "solution": solution,
        "stats": {
            "time_taken_ms": elapsed_ms,
            "nodes_visited": ctx.nodes_visited,
        },
        "expanded_courses": sessions,
    }
    logger.info(
        "%s: %s after %d node(s) in %.2f ms",
        algorithm, result["status"], ctx.nodes_visited, elapsed_ms,
    )
    return result
