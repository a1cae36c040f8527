import json
from pathlib import Path

import pytest

from timetabling.config import BENCHMARK_DIR, DEFAULT_EXAMPLE_PATH


def course(cid, teacher_id, group_id, hours=1, name=None):
    return {"id": cid, "name": name or cid, "teacher_id": teacher_id, "group_id": group_id, "hours": hours}


def teacher(tid, unavailable=()):
    return {"id": tid, "name": f"Teacher {tid}", "unavailable_time_slots": list(unavailable)}


def group(gid, unavailable=(), size=30):
    return {"id": gid, "name": f"Group {gid}", "size": size, "unavailable_time_slots": list(unavailable)}


def room(rid, capacity=30):
    return {"id": rid, "name": f"Room {rid}", "capacity": capacity}


def slot(sid, day="Monday", time="09:00-10:00"):
    return {"id": sid, "day": day, "time": time}


def as_args(instance):
    return (
        instance["courses"],
        instance["teachers"],
        instance["rooms"],
        instance["time_slots"],
        instance["student_groups"],
    )


@pytest.fixture
def example_instance():
    with open(DEFAULT_EXAMPLE_PATH, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def small_instance():
    with open(Path(BENCHMARK_DIR) / "small.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def trivial_instance():
    return {
        "courses": [course("C1", "T1", "G1")],
        "teachers": [teacher("T1")],
        "rooms": [room("R1")],
        "time_slots": [slot("S1")],
        "student_groups": [group("G1")],
    }


@pytest.fixture
def two_independent_sessions():
    # Different teachers and groups; only the rooms can collide.
    return {
        "courses": [course("C1", "T1", "G1"), course("C2", "T2", "G2")],
        "teachers": [teacher("T1"), teacher("T2")],
        "rooms": [room("R1")],
        "time_slots": [slot("S1")],
        "student_groups": [group("G1"), group("G2")],
    }


@pytest.fixture
def shared_teacher_conflict():
    # A two-hour course and a third session for the same group, over two
    # time-slots: three sessions that must all sit at different slots.
    return {
        "courses": [course("C1", "X", "G1", hours=2), course("C2", "Y", "G1")],
        "teachers": [teacher("X"), teacher("Y")],
        "rooms": [room("R1"), room("R2")],
        "time_slots": [slot("S1"), slot("S2", time="10:00-11:00")],
        "student_groups": [group("G1")],
    }


@pytest.fixture
def unique_instance():
    # Each teacher can only make one distinct slot and there is one room.
    return {
        "courses": [course("C1", "T1", "G1"), course("C2", "T2", "G2"), course("C3", "T3", "G3")],
        "teachers": [
            teacher("T1", unavailable=["S2", "S3"]),
            teacher("T2", unavailable=["S1", "S3"]),
            teacher("T3", unavailable=["S1", "S2"]),
        ],
        "rooms": [room("R1")],
        "time_slots": [slot("S1"), slot("S2", time="10:00-11:00"), slot("S3", time="11:00-12:00")],
        "student_groups": [group("G1"), group("G2"), group("G3")],
    }
