"""Per-condition chronological ordering and previous-log linkage.

Everything here is recomputed from the full log collection on each call.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from models import Log


@dataclass(frozen=True)
class Timeline:
    condition_id: str
    logs: tuple = ()  # ascending by (timestamp, seq, input position)
    previous: dict = field(default_factory=dict)  # log id -> Log | None

    def previous_of(self, log: Log) -> Optional[Log]:
        return self.previous.get(log.id)

    @property
    def latest(self) -> Optional[Log]:
        return self.logs[-1] if self.logs else None


def _chrono_key(log: Log):
    return (log.timestamp, log.seq)


def sort_ascending(logs: Iterable[Log]) -> list[Log]:
    # sorted() is stable, so logs sharing (timestamp, seq) keep input order.
    return sorted(logs, key=_chrono_key)


def logs_descending(logs: Iterable[Log]) -> list[Log]:
    """Most recent first; ties keep the later-inserted log first."""
    return list(reversed(sort_ascending(logs)))


def _link(condition_id: str, ordered: list[Log]) -> Timeline:
    previous: dict = {}
    last = None
    for log in ordered:
        # Equal timestamps are ordered by insertion, so the earlier-inserted
        # log of a tie is the predecessor of the later one.
        previous[log.id] = last
        last = log
    return Timeline(condition_id=condition_id, logs=tuple(ordered), previous=previous)


def condition_timeline(logs: Iterable[Log], condition_id: str) -> Timeline:
    return _link(condition_id, sort_ascending(l for l in logs if l.condition_id == condition_id))


def index_timelines(logs: Iterable[Log]) -> dict[str, Timeline]:
    by_condition: dict[str, list[Log]] = defaultdict(list)
    for log in logs:
        by_condition[log.condition_id].append(log)
    return {cid: _link(cid, sort_ascending(items)) for cid, items in by_condition.items()}


def previous_log_map(logs: Iterable[Log]) -> dict[str, Optional[Log]]:
    result: dict[str, Optional[Log]] = {}
    for timeline in index_timelines(logs).values():
        result.update(timeline.previous)
    return result
