#!/usr/bin/env python3
"""Batch runner for the timetabling solver.

This script runs both search strategies on multiple instances, repeats
each run, and writes search telemetry to CSV.
"""

from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Any, Dict, List

import sys

# Make project root importable
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

from timetabling.config import BENCHMARK_DIR, configure_logging
from timetabling.crosscheck import is_satisfiable, verify_solution
from timetabling.solver import ALGORITHMS, SOLVED, expand_sessions, solve


# ---------- Helpers ----------

def load_instance(size: str) -> Dict[str, Any]:
    path = BENCHMARK_DIR / f"{size}.json"
    if not path.exists():
        raise FileNotFoundError(f"No benchmark data found for '{size}' at {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def instance_args(data: Dict[str, Any]) -> List[Any]:
    return [
        data.get("courses", []),
        data.get("teachers", []),
        data.get("rooms", []),
        data.get("time_slots", []),
        data.get("student_groups", []),
    ]


# ---------- Benchmark Runner ----------

def run_benchmark(
    sizes: List[str],
    algorithms: List[str],
    repeats: int,
    output: Path,
    verify: bool = False,
) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []

    print("Running benchmark (deterministic search, timing varies per repeat).")

    for size in sizes:
        data = load_instance(size)
        args = instance_args(data)

        meta = {
            "instance": size,
            "n_courses": len(data.get("courses", [])),
            "n_sessions": len(expand_sessions(data.get("courses", []))),
            "n_teachers": len(data.get("teachers", [])),
            "n_groups": len(data.get("student_groups", [])),
            "n_rooms": len(data.get("rooms", [])),
            "n_time_slots": len(data.get("time_slots", [])),
        }
        satisfiable = is_satisfiable(*args) if verify else None

        for algorithm in algorithms:
            for repeat in range(repeats):
                result = solve(algorithm, *args)
                stats = result["stats"]

                record = {
                    **meta,
                    "algorithm": algorithm,
                    "repeat": repeat,
                    "status": result["status"],
                    "nodes_visited": stats["nodes_visited"],
                    "time_taken_ms": stats["time_taken_ms"],
                    "cpsat_satisfiable": satisfiable,
                    "violations": None,
                    "agrees_with_cpsat": None,
                }
                if verify:
                    record["violations"] = (
                        len(verify_solution(result, *args)) if result["status"] == SOLVED else 0
                    )
                    record["agrees_with_cpsat"] = (result["status"] == SOLVED) == satisfiable

                records.append(record)

                print(
                    f"[{size}] {algorithm} run={repeat}: "
                    f"status={result['status']} nodes={stats['nodes_visited']} "
                    f"time={stats['time_taken_ms']:.2f}ms"
                )

    # ---------- Write CSV ----------

    fieldnames = [
        "instance",
        "algorithm",
        "repeat",
        "status",
        "nodes_visited",
        "time_taken_ms",
        "n_courses",
        "n_sessions",
        "n_teachers",
        "n_groups",
        "n_rooms",
        "n_time_slots",
        "cpsat_satisfiable",
        "violations",
        "agrees_with_cpsat",
    ]

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()
        for record in records:
            writer.writerow(record)

    print(f"Wrote benchmark results to {output}")
    return records


# ---------- CLI ----------

def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--sizes", nargs="+", default=["small", "medium", "large"])
    parser.add_argument("--algorithms", nargs="+", choices=ALGORITHMS, default=list(ALGORITHMS))
    parser.add_argument("--repeats", type=int, default=5)
    parser.add_argument("--verify", action="store_true", help="cross-check results with CP-SAT")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument(
        "--output",
        type=Path,
        default=PROJECT_ROOT / "results.csv",
    )
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)
    run_benchmark(
        sizes=args.sizes,
        algorithms=args.algorithms,
        repeats=args.repeats,
        output=args.output,
        verify=args.verify,
    )


if __name__ == "__main__":
    main()
