"""Notification feed: seeding, derivation, dedupe and read state."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

from cognicanvas.services.notifications import (
    Notification,
    NotificationCenter,
    inactivity_nudges,
    revision_reminders,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _notification(key: str, type_: str = "system", minutes_ago: int = 0) -> Notification:
    return Notification(
        key=key,
        type=type_,
        title=key,
        message=key,
        timestamp=NOW - timedelta(minutes=minutes_ago),
    )


def test_first_access_seeds_welcome():
    center = NotificationCenter()
    user_id = uuid4()

    feed = center.feed(user_id)

    assert [n.title for n in feed] == ["Welcome to CogniCanvas!"]
    assert feed[0].type == "system"
    assert center.unread_count(user_id) == 1


def test_merge_adds_each_key_once():
    center = NotificationCenter()
    user_id = uuid4()

    added = center.merge(user_id, [_notification("a"), _notification("a"), _notification("b")])
    again = center.merge(user_id, [_notification("a")])

    assert [n.key for n in added] == ["a", "b"]
    assert again == []
    assert len(center.feed(user_id)) == 3


def test_removed_notification_is_not_merged_back():
    center = NotificationCenter()
    user_id = uuid4()
    (added,) = center.merge(user_id, [_notification("revision-due:1", "revision_reminder")])

    center.remove(user_id, added.id)
    center.merge(user_id, [_notification("revision-due:1", "revision_reminder")])

    assert center.feed(user_id, "revision") == []


def test_filters_and_order():
    center = NotificationCenter()
    user_id = uuid4()
    center.merge(
        user_id,
        [
            _notification("old-revision", "revision_reminder", minutes_ago=30),
            _notification("nudge", "inactivity_nudge", minutes_ago=10),
            _notification("badge", "achievement", minutes_ago=5),
        ],
    )

    assert [n.key for n in center.feed(user_id, "revision")] == ["old-revision"]
    assert {n.key for n in center.feed(user_id, "system")} == {"system:welcome", "nudge"}
    keys = [n.key for n in center.feed(user_id)]
    assert keys.index("badge") < keys.index("nudge") < keys.index("old-revision")


def test_read_state():
    center = NotificationCenter()
    user_id = uuid4()
    center.merge(user_id, [_notification("a"), _notification("b")])
    first = center.feed(user_id)[0]

    center.mark_read(user_id, first.id)

    assert center.unread_count(user_id) == 2
    assert first.id not in {n.id for n in center.feed(user_id, "unread")}
    assert center.mark_all_read(user_id) == 2
    assert center.unread_count(user_id) == 0


def test_feeds_are_per_user():
    center = NotificationCenter()
    alice, bob = uuid4(), uuid4()

    center.merge(alice, [_notification("a")])

    assert len(center.feed(alice)) == 2
    assert len(center.feed(bob)) == 1


def test_revision_reminders_priority():
    note_id = uuid4()
    due = SimpleNamespace(id=uuid4(), note_id=note_id, completed=False, scheduled_at=NOW - timedelta(hours=1))
    soon = SimpleNamespace(id=uuid4(), note_id=note_id, completed=False, scheduled_at=NOW + timedelta(hours=3))
    far = SimpleNamespace(id=uuid4(), note_id=note_id, completed=False, scheduled_at=NOW + timedelta(days=3))
    done = SimpleNamespace(id=uuid4(), note_id=note_id, completed=True, scheduled_at=NOW - timedelta(days=1))

    reminders = revision_reminders([due, soon, far, done], {note_id: "Limits"}, NOW)

    assert [(r.title, r.priority) for r in reminders] == [
        ("Revision Reminder", "high"),
        ("Upcoming Revision", "medium"),
    ]
    assert reminders[0].message == 'Time to review "Limits"'
    assert reminders[0].action_url == f"/notes/{note_id}"


def test_inactivity_nudge_after_two_weeks():
    idle = SimpleNamespace(id=uuid4(), name="Calculus")
    active = SimpleNamespace(id=uuid4(), name="Physics")

    nudges = inactivity_nudges(
        [(idle, NOW - timedelta(days=14)), (active, NOW - timedelta(days=13))], NOW
    )

    assert len(nudges) == 1
    assert nudges[0].message == (
        "It's been 2 weeks since you last visited your Calculus notes. "
        "Maybe it's time for a review?"
    )
    assert nudges[0].priority == "medium"


async def test_feed_endpoint_derives_and_dedupes(client, hierarchy):
    note_id = hierarchy["note"]["id"]
    await client.post(f"/api/notes/{note_id}/revisions", json={"scheduledAt": "2020-01-01T10:00:00Z"})

    first = (await client.get("/api/notifications")).json()
    second = (await client.get("/api/notifications")).json()

    assert len(first["notifications"]) == len(second["notifications"])
    titles = [n["title"] for n in first["notifications"]]
    assert "Welcome to CogniCanvas!" in titles
    assert "Achievement Unlocked!" in titles
    revision = (await client.get("/api/notifications", params={"filter": "revision"})).json()
    assert [(n["title"], n["priority"]) for n in revision["notifications"]] == [
        ("Revision Reminder", "high")
    ]
    assert revision["notifications"][0]["actionUrl"] == f"/notes/{note_id}"


async def test_mark_read_and_delete_endpoints(client):
    feed = (await client.get("/api/notifications")).json()
    welcome = feed["notifications"][0]
    assert feed["unreadCount"] == 1

    read = await client.post(f"/api/notifications/{welcome['id']}/read")
    assert read.status_code == 200
    assert read.json()["read"] is True
    assert (await client.get("/api/notifications")).json()["unreadCount"] == 0

    assert (await client.delete(f"/api/notifications/{welcome['id']}")).status_code == 204
    assert (await client.get("/api/notifications")).json()["notifications"] == []
    assert (await client.post(f"/api/notifications/{welcome['id']}/read")).status_code == 404


async def test_read_all_endpoint(client, hierarchy):
    await client.get("/api/notifications")

    response = await client.post("/api/notifications/read-all")

    assert response.status_code == 200
    assert response.json()["updated"] >= 1
    unread = (await client.get("/api/notifications", params={"filter": "unread"})).json()
    assert unread == {"notifications": [], "unreadCount": 0}


async def test_invalid_filter_rejected(client):
    response = await client.get("/api/notifications", params={"filter": "everything"})
    assert response.status_code == 400
