import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

# ============================================================
# Paths
# ============================================================
PROJECT_ROOT = Path(__file__).resolve().parents[1]

parser = argparse.ArgumentParser()
parser.add_argument("--input", type=Path, default=PROJECT_ROOT / "results.csv")
args = parser.parse_args()

print(f"Loading results from: {args.input}")

# ============================================================
# Load CSV
# ============================================================
df = pd.read_csv(args.input)
df.columns = df.columns.str.strip()

size_order = [s for s in ["small", "medium", "large"] if s in set(df["instance"])]
size_order += sorted(set(df["instance"]) - set(size_order))

# ============================================================
# PLOT 1: Nodes visited per instance, by strategy
# ============================================================
# Search is deterministic, so every repeat reports the same count.
nodes = (
    df.groupby(["instance", "algorithm"])["nodes_visited"]
      .max()
      .unstack("algorithm")
      .reindex(size_order)
)

ax = nodes.plot(kind="bar", figsize=(7, 4), logy=True)
ax.set_xlabel("Instance")
ax.set_ylabel("Nodes visited (log scale)")
ax.set_title("Search effort by strategy")
ax.grid(axis="y")
plt.tight_layout()

# ============================================================
# PLOT 2: Mean search time per instance, by strategy
# ============================================================
timing = (
    df.groupby(["instance", "algorithm"])["time_taken_ms"]
      .agg(["mean", "std"])
      .unstack("algorithm")
      .reindex(size_order)
)

ax = timing["mean"].plot(kind="bar", yerr=timing["std"], capsize=6, figsize=(7, 4))
ax.set_xlabel("Instance")
ax.set_ylabel("Mean search time (ms)")
ax.set_title("Search time by strategy")
ax.grid(axis="y")
plt.tight_layout()

# ============================================================
# PLOT 3: Outcome per instance, by strategy
# ============================================================
plt.figure(figsize=(6, 4))
solved = (
    df.assign(solved=df["status"] == "SOLVED")
      .groupby(["instance", "algorithm"])["solved"]
      .mean()
      .unstack("algorithm")
      .reindex(size_order)
)
for algorithm in solved.columns:
    plt.plot(solved.index, solved[algorithm], marker="o", label=algorithm)
plt.ylabel("Share of runs solved")
plt.ylim(-0.05, 1.05)
plt.title("Outcome by instance")
plt.legend()
plt.grid(True)
plt.tight_layout()

# ============================================================
# SHOW ALL FIGURES AT ONCE
# ============================================================
plt.show()
