from datetime import datetime

from models import Condition, Log


def make_condition(cid: str, label: str = "", **kwargs) -> Condition:
    return Condition(id=cid, label=label or cid.title(), **kwargs)


def make_log(lid: str, cid: str, when: datetime, intensity: int, seq: int = 0, **kwargs) -> Log:
    return Log(id=lid, condition_id=cid, timestamp=when, intensity=intensity, seq=seq, **kwargs)
