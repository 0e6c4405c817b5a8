"""Dashboard -> subject -> notebook navigation."""

from uuid import uuid4

import pytest

from conftest import make_notebook, make_subject

from cognicanvas.services.navigation import NavigationError, ViewKind, ViewStack


def test_stack_transitions():
    stack = ViewStack()
    subject_id, notebook_id = uuid4(), uuid4()

    stack.open_subject(subject_id, "Calculus")
    stack.open_notebook(notebook_id, "Chapter 1")

    assert stack.current.kind is ViewKind.NOTEBOOK
    assert [v.label for v in stack.breadcrumbs()] == ["Dashboard", "Calculus", "Chapter 1"]
    assert stack.back().id == subject_id
    assert stack.back().kind is ViewKind.DASHBOARD


def test_back_never_pops_dashboard():
    stack = ViewStack()

    assert stack.back().kind is ViewKind.DASHBOARD
    assert stack.previous is None
    assert len(stack.breadcrumbs()) == 1


def test_notebook_requires_subject_view():
    with pytest.raises(NavigationError):
        ViewStack().open_notebook(uuid4(), "Chapter 1")


def test_subject_only_from_dashboard():
    stack = ViewStack()
    stack.open_subject(uuid4(), "Calculus")

    with pytest.raises(NavigationError):
        stack.open_subject(uuid4(), "Physics")


async def test_dashboard_view(client):
    response = await client.get("/api/navigation")

    assert response.status_code == 200
    body = response.json()
    assert body["current"] == {"kind": "dashboard", "id": None, "label": "Dashboard"}
    assert body["back"] is None


async def test_notebook_view_from_notebook_id(client):
    subject = await make_subject(client)
    notebook = await make_notebook(client, subject["id"])

    response = await client.get("/api/navigation", params={"notebookId": notebook["id"]})

    body = response.json()
    assert [v["kind"] for v in body["breadcrumbs"]] == ["dashboard", "subject", "notebook"]
    assert body["current"]["label"] == "Chapter 1"
    assert body["back"] == {"kind": "subject", "id": subject["id"], "label": "Calculus"}


async def test_notebook_outside_subject_rejected(client):
    subject = await make_subject(client)
    other = await make_subject(client, "Physics")
    notebook = await make_notebook(client, subject["id"])

    response = await client.get(
        "/api/navigation", params={"subjectId": other["id"], "notebookId": notebook["id"]}
    )

    assert response.status_code == 400


async def test_unknown_subject_is_404(client):
    response = await client.get(
        "/api/navigation", params={"subjectId": "00000000-0000-0000-0000-000000000000"}
    )
    assert response.status_code == 404
