from pathlib import Path
from typing import Dict, List, Tuple

import matplotlib.pyplot as plt


def runtime_chart(series: Dict[str, List[Tuple[int, float]]], title: str, path) -> Path:
    """Line chart of runtime (ms) against vertex count, one line per solver."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(6.4, 4.8))
    for label, points in series.items():
        if not points:
            continue
        xs = [n for n, _ in points]
        ys = [seconds * 1000.0 for _, seconds in points]
        ax.plot(xs, ys, marker="o", linewidth=2.5, label=label)
    ax.set_title(title)
    ax.set_xlabel("Vertices")
    ax.set_ylabel("Time (ms)")
    ax.set_facecolor("#dcdcdc")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path
