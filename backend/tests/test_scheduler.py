from datetime import datetime, timedelta, timezone

from todoapp.core.scheduler import purge_deleted_todos_job
from todoapp.models.todo import Todo
from todoapp.models.user import User

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _seed(db):
    user = User(email="a@x.com", password_hash="digest", name="A")
    db.add(user)
    db.commit()
    todos = {
        "live": Todo(user_id=user.id, title="live"),
        "recently_deleted": Todo(user_id=user.id, title="recent", deleted_at=NOW - timedelta(hours=1)),
        "long_deleted": Todo(user_id=user.id, title="old", deleted_at=NOW - timedelta(days=30)),
    }
    db.add_all(todos.values())
    db.commit()
    return {name: todo.id for name, todo in todos.items()}


def test_purges_only_todos_past_retention(db, session_factory):
    ids = _seed(db)

    purged = purge_deleted_todos_job(session_factory, retention_hours=24, now=NOW)

    assert purged == 1
    remaining = {todo.id for todo in db.query(Todo).all()}
    assert remaining == {ids["live"], ids["recently_deleted"]}


def test_nothing_to_purge(session_factory):
    assert purge_deleted_todos_job(session_factory, retention_hours=24, now=NOW) == 0


def test_store_failure_is_logged_not_raised(engine, session_factory, caplog):
    # Dropping the table makes the purge query fail
    Todo.__table__.drop(engine)

    assert purge_deleted_todos_job(session_factory, retention_hours=24, now=NOW) == 0
    assert "Error in purge_deleted_todos_job" in caplog.text
