#!/usr/bin/env python3
"""
Hub traffic log analysis script.

Reads a traffic_log.csv produced by TrafficRecorder and computes:

- Basic counts:
    * Number of "message", "new topic" and "cancel" events
    * Distinct topics seen

- Routing:
    * Messages published while no subscription was live for their topic
    * Average fan-out (live subscriptions per published message)

- Lifetimes:
    * Subscriptions opened / cancelled / still open at end of log
    * Mean and max lifetime (s) of cancelled subscriptions

- Topics:
    * Per-topic message / subscribe / cancel counts

Usage:
    python analysis.py logs/traffic_log.csv
    python analysis.py logs/traffic_log.csv --out-csv summary.csv
"""

import argparse
import csv
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

import config


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass
class LogRow:
    seq: int
    time_s: float
    event: str
    topic: str
    subscription_id: Optional[int]
    argc: int


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------

def load_log(path: str) -> List[LogRow]:
    """
    Load the traffic log CSV into a list of LogRow objects, sorted by seq.
    """
    rows: List[LogRow] = []
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for r in reader:
            try:
                sub_id = r["subscription_id"].strip()
                rows.append(
                    LogRow(
                        seq=int(r["seq"]),
                        time_s=float(r["time_s"]),
                        event=r["event"],
                        topic=r["topic"],
                        subscription_id=int(sub_id) if sub_id else None,
                        argc=int(r["argc"]),
                    )
                )
            except KeyError as e:
                raise RuntimeError(f"Missing expected column in CSV: {e}")
    rows.sort(key=lambda x: x.seq)
    return rows


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

def compute_basic_counts(rows: List[LogRow]) -> Dict[str, float]:
    events = Counter(r.event for r in rows)
    return {
        "events": len(rows),
        "messages": events[config.EVENT_MESSAGE],
        "subscribes": events[config.EVENT_NEW_TOPIC],
        "cancels": events[config.EVENT_CANCEL],
        "topics": len({r.topic for r in rows}),
    }


def compute_routing(rows: List[LogRow]) -> Dict[str, float]:
    """
    Replay subscribe/cancel rows to know how many subscriptions were live
    for a topic at the moment each message was published.
    """
    live: Counter = Counter()
    messages = 0
    unrouted = 0
    fanout_total = 0

    for r in rows:
        if r.event == config.EVENT_NEW_TOPIC:
            live[r.topic] += 1
        elif r.event == config.EVENT_CANCEL:
            live[r.topic] = max(0, live[r.topic] - 1)
        elif r.event == config.EVENT_MESSAGE:
            messages += 1
            fanout_total += live[r.topic]
            if live[r.topic] == 0:
                unrouted += 1

    return {
        "unrouted_messages": unrouted,
        "unrouted_ratio": (unrouted / messages) if messages else 0.0,
        "mean_fanout": (fanout_total / messages) if messages else 0.0,
    }


def compute_lifetimes(rows: List[LogRow]) -> Dict[str, float]:
    opened: Dict[int, float] = {}
    lifetimes: List[float] = []

    for r in rows:
        if r.subscription_id is None:
            continue
        if r.event == config.EVENT_NEW_TOPIC:
            opened[r.subscription_id] = r.time_s
        elif r.event == config.EVENT_CANCEL and r.subscription_id in opened:
            lifetimes.append(r.time_s - opened.pop(r.subscription_id))

    return {
        "opened": len(opened) + len(lifetimes),
        "cancelled": len(lifetimes),
        "still_open": len(opened),
        "mean_lifetime_s": (sum(lifetimes) / len(lifetimes)) if lifetimes else 0.0,
        "max_lifetime_s": max(lifetimes) if lifetimes else 0.0,
    }


def compute_topic_activity(rows: List[LogRow]) -> Dict[str, float]:
    """Flattened per-topic counts: '<topic>.<event>' -> n."""
    out: Dict[str, float] = {}
    for r in rows:
        key = f"{r.topic}.{r.event.replace(' ', '_')}"
        out[key] = out.get(key, 0) + 1
    return out


# ---------------------------------------------------------------------------
# Main / reporting
# ---------------------------------------------------------------------------

def print_block(title: str, metrics: Dict[str, float]) -> None:
    print(title)
    for k in sorted(metrics.keys()):
        print(f"{k:40s}: {metrics[k]}")
    print()


def write_metrics_csv(path: str, blocks: Dict[str, Dict[str, float]]) -> None:
    """
    Flatten named metric blocks into a single-row CSV for easy comparison
    across runs.
    """
    flat: Dict[str, float] = {}
    for block_name, metrics in blocks.items():
        for k, v in metrics.items():
            flat[f"{block_name}.{k}"] = v

    fieldnames = sorted(flat.keys())
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerow(flat)


def main():
    parser = argparse.ArgumentParser(description="Analyze hub traffic log CSV.")
    parser.add_argument("csv_path", help="Path to traffic_log.csv")
    parser.add_argument(
        "--out-csv",
        help="Optional path to write a single-row CSV summary of all metrics.",
        default=None,
    )
    args = parser.parse_args()

    rows = load_log(args.csv_path)

    basic = compute_basic_counts(rows)
    routing = compute_routing(rows)
    lifetimes = compute_lifetimes(rows)
    topics = compute_topic_activity(rows)

    print_block("=== Basic Counts ===", basic)
    print_block("=== Routing ===", routing)
    print_block("=== Subscription Lifetimes ===", lifetimes)
    print_block("=== Topics ===", topics)

    if args.out_csv:
        all_blocks = {
            "basic": basic,
            "routing": routing,
            "lifetimes": lifetimes,
            "topics": topics,
        }
        write_metrics_csv(args.out_csv, all_blocks)
        print(f"Metric summary written to: {args.out_csv}")


if __name__ == "__main__":
    main()
