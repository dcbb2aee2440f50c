import json
import sys

import matplotlib.pyplot as plt


STATUS_COLORS = {"active": "green", "negotiating": "gold", "rerouting": "orange", "resolved": "gray"}


def load_log(path):
    with open(path, "r") as f:
        return json.load(f)


def main(log_path="logs/sim.json"):
    data = load_log(log_path)
    ticks = [entry["tick"] for entry in data]

    fig, (ax_status, ax_events) = plt.subplots(2, 1, sharex=True, figsize=(8, 6))
    for status, color in STATUS_COLORS.items():
        series = [entry.get("counts", {}).get(status, 0) for entry in data]
        if any(series):
            ax_status.plot(ticks, series, color=color, label=status)
    ax_status.set_ylabel("agents")
    ax_status.legend(loc="upper right")
    ax_status.set_title("Agent status over time")

    conflicts = []
    total = 0
    for entry in data:
        total += sum(1 for e in entry.get("events", []) if e["type"] == "conflict_detected")
        conflicts.append(total)
    ax_events.plot(ticks, conflicts, color="red")
    ax_events.set_xlabel("tick")
    ax_events.set_ylabel("conflicts (cumulative)")
    plt.show()


if __name__ == "__main__":
    log = sys.argv[1] if len(sys.argv) > 1 else "logs/sim.json"
    main(log)
