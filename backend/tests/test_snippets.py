"""Marking snippets as important, end to end."""

from bs4 import BeautifulSoup
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.dml import Update

from conftest import make_note, make_notebook, make_subject


def _snippet_body(hierarchy: dict, content: str, **extra) -> dict:
    return {
        "content": content,
        "noteId": hierarchy["note"]["id"],
        "notebookId": hierarchy["notebook"]["id"],
        "subjectId": hierarchy["subject"]["id"],
        **extra,
    }


async def test_calculus_walkthrough(client):
    response = await client.post("/api/subjects/", json={"name": "Calculus"})
    assert response.status_code == 201
    subject = response.json()
    assert subject["notebookCount"] == 0

    notebook = await make_notebook(client, subject["id"], "Chapter 1")
    notebooks = (await client.get(f"/api/subjects/{subject['id']}/notebooks")).json()
    assert len(notebooks) == 1

    note = await make_note(
        client, notebook["id"], "Limits", "<p>We say the limit exists if it is finite.</p>"
    )
    notes = (await client.get("/api/notes/", params={"notebookId": notebook["id"]})).json()
    assert len(notes) == 1
    assert notes[0]["importantSnippetCount"] == 0

    marked = await client.post(
        "/api/important-snippets",
        json={
            "content": "limit exists",
            "noteId": note["id"],
            "notebookId": notebook["id"],
            "subjectId": subject["id"],
        },
    )
    assert marked.status_code == 201
    snippets = (
        await client.get("/api/important-snippets", params={"subjectId": subject["id"]})
    ).json()
    assert len(snippets) == 1
    assert (await client.get(f"/api/notes/{note['id']}")).json()["importantSnippetCount"] == 1

    assert (await client.delete(f"/api/subjects/{subject['id']}")).status_code == 204
    assert (await client.get(f"/api/subjects/{subject['id']}/notebooks")).json() == []
    assert (await client.get("/api/notes/", params={"notebookId": notebook["id"]})).json() == []


async def test_snippet_copies_lineage_and_highlights(client, hierarchy):
    response = await client.post(
        "/api/important-snippets", json=_snippet_body(hierarchy, "limit exists")
    )

    assert response.status_code == 201
    snippet = response.json()
    assert snippet["highlighted"] is True
    assert snippet["importantSnippetCount"] == 1
    assert snippet["noteTitle"] == "Limits"
    assert snippet["notebookName"] == "Chapter 1"
    assert snippet["subjectName"] == "Calculus"
    assert snippet["subjectColor"] == "#3B82F6"

    note = (await client.get(f"/api/notes/{hierarchy['note']['id']}")).json()
    mark = BeautifulSoup(note["content"], "html.parser").find("mark")
    assert mark.get_text() == "limit exists"
    assert mark["data-snippet-id"] == snippet["id"]
    assert "important-highlight" in mark["class"]


async def test_snippet_content_keeps_whitespace(client, hierarchy):
    selection = "  limit exists\n"

    response = await client.post(
        "/api/important-snippets", json=_snippet_body(hierarchy, selection)
    )

    assert response.status_code == 201
    assert response.json()["content"] == selection
    stored = (await client.get("/api/important-snippets")).json()
    assert stored[0]["content"] == selection


async def test_counter_failure_still_records_snippet(client, hierarchy, monkeypatch):
    execute = AsyncSession.execute

    async def failing_counter(self, statement, *args, **kwargs):
        if isinstance(statement, Update) and statement.table.name == "notes":
            raise OperationalError(str(statement), {}, Exception("database is locked"))
        return await execute(self, statement, *args, **kwargs)

    monkeypatch.setattr(AsyncSession, "execute", failing_counter)

    response = await client.post(
        "/api/important-snippets", json=_snippet_body(hierarchy, "limit exists")
    )

    assert response.status_code == 201
    body = response.json()
    assert body["importantSnippetCount"] is None
    assert body["highlighted"] is True
    assert body["noteTitle"] == "Limits"

    monkeypatch.undo()
    stored = (await client.get("/api/important-snippets")).json()
    assert [s["id"] for s in stored] == [body["id"]]
    note = (await client.get(f"/api/notes/{hierarchy['note']['id']}")).json()
    assert note["importantSnippetCount"] == 0
    assert "important-highlight" in note["content"]


async def test_text_not_in_note_still_records_snippet(client, hierarchy):
    response = await client.post(
        "/api/important-snippets", json=_snippet_body(hierarchy, "derivative")
    )

    assert response.status_code == 201
    assert response.json()["highlighted"] is False
    assert response.json()["importantSnippetCount"] == 1
    note = (await client.get(f"/api/notes/{hierarchy['note']['id']}")).json()
    assert note["content"] == hierarchy["note"]["content"]


async def test_second_occurrence(client, hierarchy):
    response = await client.post(
        "/api/important-snippets", json=_snippet_body(hierarchy, "limit", occurrence=1)
    )

    assert response.json()["highlighted"] is True
    note = (await client.get(f"/api/notes/{hierarchy['note']['id']}")).json()
    # "one-sided limits" holds the second "limit"
    assert "one-sided <mark" in note["content"]


async def test_blank_content_rejected(client, hierarchy):
    response = await client.post("/api/important-snippets", json=_snippet_body(hierarchy, "   "))
    assert response.status_code == 400


async def test_missing_field_rejected(client, hierarchy):
    body = _snippet_body(hierarchy, "limit")
    del body["subjectId"]

    response = await client.post("/api/important-snippets", json=body)

    assert response.status_code == 400


async def test_mismatched_subject_rejected(client, hierarchy):
    other = await make_subject(client, "Physics")

    response = await client.post(
        "/api/important-snippets",
        json=_snippet_body(hierarchy, "limit", subjectId=other["id"]),
    )

    assert response.status_code == 400
    assert (await client.get("/api/important-snippets")).json() == []


async def test_unknown_note_is_404(client, hierarchy):
    response = await client.post(
        "/api/important-snippets",
        json=_snippet_body(hierarchy, "limit", noteId="00000000-0000-0000-0000-000000000000"),
    )
    assert response.status_code == 404


async def test_list_filters_by_subject_newest_first(client, hierarchy):
    other_subject = await make_subject(client, "Physics")
    other_notebook = await make_notebook(client, other_subject["id"])
    other_note = await make_note(client, other_notebook["id"], "Motion", "<p>velocity</p>")

    first = await client.post("/api/important-snippets", json=_snippet_body(hierarchy, "limit"))
    second = await client.post("/api/important-snippets", json=_snippet_body(hierarchy, "exists"))
    await client.post(
        "/api/important-snippets",
        json={
            "content": "velocity",
            "noteId": other_note["id"],
            "notebookId": other_notebook["id"],
            "subjectId": other_subject["id"],
        },
    )

    response = await client.get(
        "/api/important-snippets", params={"subjectId": hierarchy["subject"]["id"]}
    )

    ids = [s["id"] for s in response.json()]
    assert ids == [second.json()["id"], first.json()["id"]]
    assert len((await client.get("/api/important-snippets")).json()) == 3


async def test_snippets_go_with_deleted_note(client, hierarchy):
    await client.post("/api/important-snippets", json=_snippet_body(hierarchy, "limit"))

    await client.delete(f"/api/notes/{hierarchy['note']['id']}")

    assert (await client.get("/api/important-snippets")).json() == []
