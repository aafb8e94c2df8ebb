from datetime import datetime, timezone


def utcnow() -> datetime:
    # DB'de naive UTC tutuyoruz
    return datetime.now(timezone.utc).replace(tzinfo=None)
