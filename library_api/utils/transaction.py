from contextlib import contextmanager


@contextmanager
def atomic(session):
    """Commit everything in the block once, or roll all of it back."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
