"""
Tests for the persona HTTP API.
"""

import base64

import pytest

from personalab import __version__


@pytest.fixture
def created(client, auth_headers, minimal_payload):
    response = client.post("/api/personas", json=minimal_payload, headers=auth_headers("alice"))
    assert response.status_code == 201
    return response.json()["persona"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


class TestCreate:
    def test_create(self, client, auth_headers, minimal_payload):
        response = client.post(
            "/api/personas", json=minimal_payload, headers=auth_headers("alice")
        )

        assert response.status_code == 201
        persona = response.json()["persona"]
        assert persona["userId"] == "alice"
        assert persona["authorName"] == "User"
        assert persona["isPublic"] is True
        assert persona["sourcePersonaId"] is None
        assert persona["data"]["shortBio"] == minimal_payload["data"]["shortBio"]
        assert persona["data"]["accessibility"] == {
            "needs": [],
            "assistiveTech": [],
            "constraints": [],
        }

    def test_default_locale(self, client, auth_headers, minimal_payload):
        del minimal_payload["locale"]
        response = client.post(
            "/api/personas", json=minimal_payload, headers=auth_headers("alice")
        )
        assert response.json()["persona"]["locale"] == "en-US"

    def test_requires_authentication(self, client, minimal_payload):
        response = client.post("/api/personas", json=minimal_payload)

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json() == {"error": "Not authenticated."}

    def test_invalid_token(self, client, minimal_payload):
        response = client.post(
            "/api/personas",
            json=minimal_payload,
            headers={"Authorization": "Bearer not-a-known-token"},
        )
        assert response.status_code == 401

    def test_validation_errors_list_every_field(self, client, auth_headers, minimal_payload):
        minimal_payload["data"]["goals"]["primary"] = []
        minimal_payload["data"]["personality"]["openness"] = 9

        response = client.post(
            "/api/personas", json=minimal_payload, headers=auth_headers("alice")
        )

        assert response.status_code == 422
        body = response.json()
        assert body["error"]
        paths = [field["path"] for field in body["fields"]]
        assert "data.goals.primary" in paths
        assert "data.personality.openness" in paths

    def test_body_must_be_an_object(self, client, auth_headers):
        response = client.post("/api/personas", json=["nope"], headers=auth_headers("alice"))
        assert response.status_code == 422
        assert "fields" in response.json()


class TestReadUpdateDelete:
    def test_get(self, client, created):
        response = client.get(f"/api/personas/{created['id']}")
        assert response.status_code == 200
        assert response.json()["persona"] == created

    def test_get_missing(self, client):
        response = client.get("/api/personas/00000000-0000-4000-8000-00000000dead")
        assert response.status_code == 404
        assert response.json() == {"error": "Persona not found."}

    def test_update_by_owner(self, client, auth_headers, created, full_payload):
        response = client.patch(
            f"/api/personas/{created['id']}", json=full_payload, headers=auth_headers("alice")
        )
        assert response.status_code == 200
        assert response.json()["persona"]["title"] == full_payload["title"]

    def test_update_by_non_owner(self, client, auth_headers, created, full_payload):
        response = client.patch(
            f"/api/personas/{created['id']}", json=full_payload, headers=auth_headers("bob")
        )
        assert response.status_code == 403
        assert client.get(f"/api/personas/{created['id']}").json()["persona"] == created

    def test_delete_by_non_owner(self, client, auth_headers, created):
        response = client.delete(f"/api/personas/{created['id']}", headers=auth_headers("bob"))
        assert response.status_code == 403

    def test_delete_by_owner(self, client, auth_headers, created):
        response = client.delete(f"/api/personas/{created['id']}", headers=auth_headers("alice"))
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert client.get(f"/api/personas/{created['id']}").status_code == 404


class TestForkAndList:
    def test_fork(self, client, auth_headers, created):
        response = client.post(
            f"/api/personas/{created['id']}/fork", headers=auth_headers("bob")
        )

        assert response.status_code == 201
        fork = response.json()["persona"]
        assert fork["userId"] == "bob"
        assert fork["title"] == created["title"]
        assert fork["isPublic"] is False
        assert fork["sourcePersonaId"] == created["id"]

    def test_fork_own(self, client, auth_headers, created):
        response = client.post(
            f"/api/personas/{created['id']}/fork", headers=auth_headers("alice")
        )
        assert response.json()["persona"]["title"] == f"{created['title']} (copy)"

    def test_list_mine_requires_authentication(self, client, created):
        assert client.get("/api/personas", params={"scope": "mine"}).status_code == 401

    def test_list_scopes(self, client, auth_headers, created):
        fork = client.post(
            f"/api/personas/{created['id']}/fork", headers=auth_headers("bob")
        ).json()["persona"]

        mine = client.get("/api/personas", params={"scope": "mine"}, headers=auth_headers("bob"))
        community = client.get("/api/personas", params={"scope": "community"})
        anonymous = client.get("/api/personas")

        assert [p["id"] for p in mine.json()["personas"]] == [fork["id"]]
        assert [p["id"] for p in community.json()["personas"]] == [created["id"]]
        assert [p["id"] for p in anonymous.json()["personas"]] == [created["id"]]

    def test_list_unknown_scope(self, client):
        response = client.get("/api/personas", params={"scope": "everyone"})
        assert response.status_code == 422


class TestExport:
    @pytest.mark.parametrize(
        "export_format,media_type,filename",
        [
            ("pdf-executive", "application/pdf", "mobile-banking-first-timer-executivo.pdf"),
            ("pdf-detailed", "application/pdf", "mobile-banking-first-timer-detalhado.pdf"),
            ("markdown", "text/markdown", "mobile-banking-first-timer.md"),
            ("json", "application/json", "mobile-banking-first-timer.json"),
        ],
    )
    def test_single_format(self, client, created, export_format, media_type, filename):
        response = client.get(f"/api/personas/{created['id']}/export/{export_format}")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(media_type)
        assert response.headers["content-disposition"] == f'attachment; filename="{filename}"'
        assert response.content

    def test_pdf_content(self, client, created):
        response = client.get(f"/api/personas/{created['id']}/export/pdf-detailed")
        assert response.content.startswith(b"%PDF")

    def test_unknown_format(self, client, created):
        response = client.get(f"/api/personas/{created['id']}/export/docx")
        assert response.status_code == 422

    def test_missing_persona(self, client):
        response = client.get("/api/personas/00000000-0000-4000-8000-00000000dead/export/json")
        assert response.status_code == 404

    def test_bundle(self, client, created):
        response = client.get(f"/api/personas/{created['id']}/export")

        assert response.status_code == 200
        bundle = response.json()
        assert bundle["personaId"] == created["id"]
        assert bundle["stem"] == "mobile-banking-first-timer"
        assert [a["format"] for a in bundle["artifacts"]] == [
            "pdf-executive",
            "pdf-detailed",
            "markdown",
            "json",
        ]
        pdf = base64.b64decode(bundle["artifacts"][0]["content"])
        assert pdf.startswith(b"%PDF")
        assert bundle["artifacts"][0]["mediaType"] == "application/pdf"


class TestEditForm:
    def test_get_form(self, client, created):
        response = client.get(f"/api/personas/{created['id']}/form")

        assert response.status_code == 200
        fields = response.json()["fields"]
        assert fields["title"] == created["title"]
        assert fields["isPublic"] is True
        assert fields["goals_primary"] == "Open an account without visiting a branch"
        assert fields["personality_openness"] == 2

    def test_edit_through_form(self, client, auth_headers, created):
        fields = client.get(f"/api/personas/{created['id']}/form").json()["fields"]
        fields["goals_primary"] = "Open an account online\n\n  Pay bills on time  \n"

        response = client.patch(
            f"/api/personas/{created['id']}/form", json=fields, headers=auth_headers("alice")
        )

        assert response.status_code == 200
        persona = response.json()["persona"]
        assert persona["data"]["goals"]["primary"] == ["Open an account online", "Pay bills on time"]
        assert persona["data"]["shortBio"] == created["data"]["shortBio"]

    def test_edit_through_form_by_non_owner(self, client, auth_headers, created):
        fields = client.get(f"/api/personas/{created['id']}/form").json()["fields"]
        response = client.patch(
            f"/api/personas/{created['id']}/form", json=fields, headers=auth_headers("bob")
        )
        assert response.status_code == 403

    def test_create_partial_draft(self, client, auth_headers):
        fields = {"title": "Draft persona", "name": "Ana", "goals_primary": "Save money\nTravel"}

        response = client.post(
            "/api/personas/form",
            params={"fillDefaults": "true"},
            json=fields,
            headers=auth_headers("alice"),
        )

        assert response.status_code == 201
        data = response.json()["persona"]["data"]
        assert data["name"] == "Ana"
        assert data["goals"]["primary"] == ["Save money", "Travel"]
        assert data["shortBio"] == "Not informed in this draft."
        assert data["personality"]["openness"] == 3

    def test_partial_draft_without_defaults_is_rejected(self, client, auth_headers):
        response = client.post(
            "/api/personas/form",
            json={"title": "Draft persona", "name": "Ana"},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 422
        paths = [field["path"] for field in response.json()["fields"]]
        assert "data.shortBio" in paths

    def test_form_requires_authentication(self, client):
        response = client.post("/api/personas/form", json={"title": "Draft persona"})
        assert response.status_code == 401
