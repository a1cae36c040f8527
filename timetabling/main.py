import json
import logging
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .config import configure_logging, get_settings
from .solver import solve
from .timetable import build_grid, load_summary

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="Timetabling CSP Solver")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Pydantic models for input data
class Course(BaseModel):
    id: str
    name: str
    teacher_id: str
    group_id: str
    hours: int = Field(ge=1)

class Teacher(BaseModel):
    id: str
    name: str
    unavailable_time_slots: List[str] = []

class Room(BaseModel):
    id: str
    name: str
    capacity: int = 0

class TimeSlot(BaseModel):
    id: str
    day: str
    time: str

class StudentGroup(BaseModel):
    id: str
    name: str
    size: int = 0
    unavailable_time_slots: List[str] = []

class ProblemData(BaseModel):
    algorithm: Optional[Literal["BACKTRACKING_HEURISTICS", "FORWARD_CHECKING"]] = None
    courses: List[Course]
    teachers: List[Teacher]
    rooms: List[Room]
    time_slots: List[TimeSlot]
    student_groups: List[StudentGroup]


@app.post("/solve")
async def solve_timetabling(problem_data: ProblemData):
    data = problem_data.model_dump()
    algorithm = data["algorithm"] or settings.default_algorithm
    try:
        result = solve(
            algorithm,
            data["courses"],
            data["teachers"],
            data["rooms"],
            data["time_slots"],
            data["student_groups"],
        )
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=f"Solver Error: {ve}")
    except Exception as e:
        logger.error("Unexpected solver failure", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")

    return {
        **result,
        "timetable": build_grid(
            result, data["time_slots"], data["teachers"], data["rooms"], data["student_groups"]
        ),
        "load": load_summary(result, data["teachers"], data["student_groups"]),
    }

@app.get("/")
async def read_root():
    return {"message": "Timetabling CSP Solver API"}

@app.get("/health")
def health():
    return {"ok": "true"}

@app.get("/example")
async def example_problem():
    with open(settings.example_path, "r", encoding="utf-8") as f:
        return json.load(f)
