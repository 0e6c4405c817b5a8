"""Note CRUD, saving, and fragment editing over HTTP."""

import pytest

from conftest import make_note, make_notebook, make_subject


async def test_create_and_list_notes(client):
    subject = await make_subject(client)
    notebook = await make_notebook(client, subject["id"])
    other = await make_notebook(client, subject["id"], "Chapter 2")
    note = await make_note(client, notebook["id"])
    await make_note(client, other["id"], "Elsewhere")

    response = await client.get("/api/notes/", params={"notebookId": notebook["id"]})

    assert response.status_code == 200
    notes = response.json()
    assert [n["id"] for n in notes] == [note["id"]]
    assert notes[0]["importantSnippetCount"] == 0
    assert notes[0]["background"] == "default"


async def test_blank_note_title_rejected(client, hierarchy):
    response = await client.post(
        "/api/notes/", json={"title": " \t ", "notebookId": hierarchy["notebook"]["id"]}
    )
    assert response.status_code == 400
    assert "error" in response.json()


async def test_note_requires_notebook(client):
    response = await client.post("/api/notes/", json={"title": "Loose"})
    assert response.status_code == 400


async def test_save_overwrites_content_exactly(client, hierarchy):
    note_id = hierarchy["note"]["id"]
    content = "  <p>Indented\n\ttext</p>\n"

    first = await client.patch(f"/api/notes/{note_id}", json={"content": content})
    second = await client.patch(f"/api/notes/{note_id}", json={"content": content})

    assert first.status_code == 200
    assert second.json()["content"] == content
    fetched = await client.get(f"/api/notes/{note_id}")
    assert fetched.json()["content"] == content
    assert fetched.json()["title"] == "Limits"


async def test_save_blank_title_rejected(client, hierarchy):
    response = await client.patch(f"/api/notes/{hierarchy['note']['id']}", json={"title": ""})
    assert response.status_code == 400


@pytest.mark.parametrize("field", ["title", "content", "background"])
async def test_null_for_required_note_field_rejected(client, hierarchy, field):
    note_id = hierarchy["note"]["id"]

    response = await client.patch(f"/api/notes/{note_id}", json={field: None})

    assert response.status_code == 400
    assert response.json()["detail"][0]["loc"][-1] == field
    stored = (await client.get(f"/api/notes/{note_id}")).json()
    assert stored["content"] == hierarchy["note"]["content"]


async def test_update_background(client, hierarchy):
    response = await client.patch(
        f"/api/notes/{hierarchy['note']['id']}", json={"background": "parchment"}
    )
    assert response.json()["background"] == "parchment"


async def test_delete_note(client, hierarchy):
    note_id = hierarchy["note"]["id"]

    assert (await client.delete(f"/api/notes/{note_id}")).status_code == 204
    assert (await client.get(f"/api/notes/{note_id}")).status_code == 404


# =============================================================================
# FRAGMENTS
# =============================================================================


async def test_insert_heading_appends(client, hierarchy):
    note_id = hierarchy["note"]["id"]

    response = await client.post(
        f"/api/notes/{note_id}/fragments", json={"kind": "heading", "text": "Summary", "level": 2}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["content"].endswith("</h2>")
    assert body["content"].startswith("<p>A limit exists")
    assert [f["kind"] for f in body["fragments"]] == ["heading"]
    assert body["fragments"][0]["payload"] == {"text": "Summary", "level": 2}


async def test_insert_at_index(client, hierarchy):
    note_id = hierarchy["note"]["id"]

    response = await client.post(
        f"/api/notes/{note_id}/fragments",
        json={"kind": "list", "items": ["one", "two"], "ordered": True, "index": 0},
    )

    assert response.json()["content"].startswith('<ol class="list-decimal')


async def test_code_keeps_indentation_and_is_escaped(client, hierarchy):
    note_id = hierarchy["note"]["id"]
    code = "if x < 1:\n    return '<b>'"

    response = await client.post(
        f"/api/notes/{note_id}/fragments",
        json={"kind": "code", "code": code, "language": "python"},
    )

    fragment = response.json()["fragments"][0]
    assert fragment["payload"]["code"] == code
    assert fragment["payload"]["language"] == "python"
    assert "<b>" not in response.json()["content"].split("<code>")[1]


async def test_resize_and_rotate_image(client, hierarchy):
    note_id = hierarchy["note"]["id"]
    inserted = await client.post(
        f"/api/notes/{note_id}/fragments",
        json={"kind": "image", "src": "https://example.com/graph.png", "alt": "Graph"},
    )
    fragment_id = inserted.json()["fragments"][0]["id"]

    response = await client.patch(
        f"/api/notes/{note_id}/fragments/{fragment_id}", json={"width": 320, "rotation": 450}
    )

    assert response.status_code == 200
    payload = response.json()["fragments"][0]["payload"]
    assert payload["width"] == 320
    assert payload["rotation"] == 90
    assert response.json()["fragments"][0]["id"] == fragment_id


async def test_rotating_a_drawing_is_rejected(client, hierarchy):
    note_id = hierarchy["note"]["id"]
    inserted = await client.post(
        f"/api/notes/{note_id}/fragments",
        json={"kind": "drawing", "src": "data:image/png;base64,iVBORw0KGgo="},
    )
    fragment_id = inserted.json()["fragments"][0]["id"]

    response = await client.patch(
        f"/api/notes/{note_id}/fragments/{fragment_id}", json={"rotation": 90}
    )

    assert response.status_code == 400


async def test_drawing_must_be_data_url(client, hierarchy):
    response = await client.post(
        f"/api/notes/{hierarchy['note']['id']}/fragments",
        json={"kind": "drawing", "src": "https://example.com/x.png"},
    )
    assert response.status_code == 400


async def test_unknown_fragment_kind_rejected(client, hierarchy):
    response = await client.post(
        f"/api/notes/{hierarchy['note']['id']}/fragments", json={"kind": "video", "src": "x"}
    )
    assert response.status_code == 400


async def test_remove_quote_unwraps_text(client, hierarchy):
    note_id = hierarchy["note"]["id"]
    inserted = await client.post(
        f"/api/notes/{note_id}/fragments", json={"kind": "quote", "text": "Stay curious"}
    )
    fragment_id = inserted.json()["fragments"][0]["id"]

    response = await client.delete(f"/api/notes/{note_id}/fragments/{fragment_id}")

    assert response.status_code == 200
    content = response.json()["content"]
    assert "<p>Stay curious</p>" in content
    assert "blockquote" not in content
    assert "button" not in content
    assert response.json()["fragments"] == []


async def test_remove_unknown_fragment_is_404(client, hierarchy):
    response = await client.delete(f"/api/notes/{hierarchy['note']['id']}/fragments/nope")
    assert response.status_code == 404


async def test_pdf_card(client, hierarchy):
    note_id = hierarchy["note"]["id"]

    await client.post(
        f"/api/notes/{note_id}/fragments",
        json={"kind": "pdf", "filename": "lecture.pdf", "sizeBytes": 204800},
    )
    response = await client.get(f"/api/notes/{note_id}/fragments")

    assert response.json()[0]["payload"] == {"filename": "lecture.pdf", "size_bytes": 204800}


async def test_hand_edited_content_with_broken_fragments(client, hierarchy):
    note_id = hierarchy["note"]["id"]
    saved = await client.patch(
        f"/api/notes/{note_id}",
        json={
            "content": '<p data-fragment="heading" data-fragment-id="x">hi</p>'
            '<div data-fragment="pdf" data-fragment-id="y" data-size="big"></div>'
        },
    )
    assert saved.status_code == 200

    listed = await client.get(f"/api/notes/{note_id}/fragments")
    assert listed.status_code == 200
    assert listed.json() == []

    inserted = await client.post(
        f"/api/notes/{note_id}/fragments", json={"kind": "heading", "text": "Limits"}
    )
    assert inserted.status_code == 201
    assert [f["kind"] for f in inserted.json()["fragments"]] == ["heading"]

    removed = await client.delete(f"/api/notes/{note_id}/fragments/x")
    assert removed.status_code == 200
    assert 'data-fragment-id="x"' not in removed.json()["content"]


async def test_resizing_a_broken_fragment_is_400(client, hierarchy):
    note_id = hierarchy["note"]["id"]
    await client.patch(
        f"/api/notes/{note_id}",
        json={
            "content": '<div data-fragment="image" data-fragment-id="img">'
            '<img src="/a.png" data-width="wide"></div>'
        },
    )

    response = await client.patch(f"/api/notes/{note_id}/fragments/img", json={"width": 200})

    assert response.status_code == 400
    assert "error" in response.json()
