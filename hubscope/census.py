from typing import Dict, Iterable

from .subscription import Subscription

Census = Dict[str, int]


def tally(subscriptions: Iterable[Subscription]) -> Census:
    """Count live subscriptions by topic, in first-seen topic order."""
    out: Census = {}
    for sub in subscriptions:
        if sub.cancelled:
            continue
        out[sub.topic] = out.get(sub.topic, 0) + 1
    return out


def merge(*censuses: Census) -> Census:
    """Sum censuses topic by topic."""
    out: Census = {}
    for census in censuses:
        for topic, n in census.items():
            out[topic] = out.get(topic, 0) + n
    return out
