"""
Integration tests for the projects, pages, settings and résumé endpoints
"""
import pytest
from sqlalchemy.exc import OperationalError

from crud.project import ProjectRepository
from crud.setting import SettingRepository
from tests.conftest import ADMIN_LOGIN


PROJECT = {
    "title": "A",
    "description": "d",
    "markdown": "# A",
    "images": ["http://x/y.png"],
}

PAGE = {
    "title": "About me",
    "slug": "about-me",
    "content": "## Hello\n\nI build things.",
}


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_project_requires_session_then_succeeds(async_client):
    """
    Without a session the create is rejected and nothing is stored; after
    login the same payload is created exactly once.
    """
    response = await async_client.post("/api/projects", json=PROJECT)
    assert response.status_code == 401
    assert (await async_client.get("/api/projects")).json() == []

    login = await async_client.post("/api/admin/login", json=ADMIN_LOGIN)
    assert login.status_code == 200

    response = await async_client.post("/api/projects", json=PROJECT)
    assert response.status_code == 201
    project = response.json()
    assert project["id"]
    assert project["createdAt"]
    for key, value in PROJECT.items():
        assert project[key] == value

    listed = (await async_client.get("/api/projects")).json()
    assert [p["id"] for p in listed].count(project["id"]) == 1


@pytest.mark.asyncio
async def test_mutations_without_session_change_nothing(admin_client):
    """
    Every mutating endpoint answers 401 once the session is gone, and a
    follow-up read shows the state unchanged.
    """
    project = (await admin_client.post("/api/projects", json=PROJECT)).json()
    page = (await admin_client.post("/api/pages", json=PAGE)).json()
    await admin_client.post("/api/settings", json={"key": "site_name", "value": "Jane"})
    await admin_client.put("/api/resume", json={"resumeUrl": "https://cv.example.com/a.pdf"})

    await admin_client.post("/api/admin/logout")

    attempts = [
        ("POST", "/api/projects", PROJECT),
        ("PUT", f"/api/projects/{project['id']}", {"title": "Hacked"}),
        ("DELETE", f"/api/projects/{project['id']}", None),
        ("POST", "/api/pages", {**PAGE, "slug": "other"}),
        ("PUT", f"/api/pages/{page['id']}", {"title": "Hacked"}),
        ("DELETE", f"/api/pages/{page['id']}", None),
        ("POST", "/api/settings", {"key": "site_name", "value": "Hacked"}),
        ("PUT", "/api/resume", {"resumeUrl": "https://evil.example.com/cv.pdf"}),
        ("POST", "/api/admin/logout", None),
    ]
    for method, url, body in attempts:
        response = await admin_client.request(method, url, json=body)
        assert response.status_code == 401, (method, url)
        assert response.json() == {"message": "Unauthorized"}

    assert (await admin_client.get("/api/projects")).json() == [project]
    assert (await admin_client.get("/api/pages")).json() == [page]
    settings = (await admin_client.get("/api/settings")).json()
    assert {s["key"]: s["value"] for s in settings}["site_name"] == "Jane"
    resume = (await admin_client.get("/api/resume")).json()
    assert resume == {"resumeUrl": "https://cv.example.com/a.pdf"}


@pytest.mark.asyncio
async def test_unauthorized_wins_over_invalid_body(async_client):
    response = await async_client.post("/api/projects", json={"title": ""})
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("POST", "/api/projects"),
        ("PUT", "/api/projects/some-id"),
        ("POST", "/api/pages"),
        ("PUT", "/api/pages/some-id"),
        ("POST", "/api/settings"),
        ("PUT", "/api/resume"),
    ],
)
async def test_unauthorized_wins_over_unparseable_body(async_client, method, path):
    response = await async_client.request(
        method,
        path,
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


@pytest.mark.asyncio
async def test_unparseable_body_with_session_is_invalid(admin_client):
    response = await admin_client.post(
        "/api/projects",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request data"


@pytest.mark.asyncio
async def test_unparseable_login_body_is_invalid(async_client):
    response = await async_client.post(
        "/api/admin/login",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_missing_project(async_client):
    response = await async_client.get("/api/projects/nope")
    assert response.status_code == 404
    assert response.json() == {"message": "Project not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override,field",
    [
        ({"title": "   "}, "title"),
        ({"description": ""}, "description"),
        ({"images": []}, "images"),
        ({"images": ["", "  "]}, "images"),
        ({"images": ["not a url"]}, "images"),
        ({"images": ["ftp://x/y.png"]}, "images"),
    ],
)
async def test_create_project_validation(admin_client, override, field):
    response = await admin_client.post("/api/projects", json={**PROJECT, **override})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid request data"
    assert field in {error["field"] for error in body["errors"]}
    assert (await admin_client.get("/api/projects")).json() == []


@pytest.mark.asyncio
async def test_create_project_drops_blank_images(admin_client):
    payload = {**PROJECT, "images": ["", "https://x/a.png", "  ", "https://x/b.png"]}
    response = await admin_client.post("/api/projects", json=payload)
    assert response.status_code == 201
    assert response.json()["images"] == ["https://x/a.png", "https://x/b.png"]


@pytest.mark.asyncio
async def test_partial_project_update(admin_client):
    project = (await admin_client.post("/api/projects", json=PROJECT)).json()

    response = await admin_client.put(
        f"/api/projects/{project['id']}", json={"markdown": "# Rewritten"}
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["markdown"] == "# Rewritten"
    for key in ("id", "title", "description", "images", "createdAt"):
        assert updated[key] == project[key]


@pytest.mark.asyncio
async def test_project_update_validates_supplied_fields(admin_client):
    project = (await admin_client.post("/api/projects", json=PROJECT)).json()

    response = await admin_client.put(f"/api/projects/{project['id']}", json={"images": [""]})
    assert response.status_code == 400

    fetched = (await admin_client.get(f"/api/projects/{project['id']}")).json()
    assert fetched == project


@pytest.mark.asyncio
async def test_update_and_delete_missing_project(admin_client):
    assert (await admin_client.put("/api/projects/nope", json={"title": "x"})).status_code == 404
    assert (await admin_client.delete("/api/projects/nope")).status_code == 404


@pytest.mark.asyncio
async def test_delete_project(admin_client):
    project = (await admin_client.post("/api/projects", json=PROJECT)).json()

    response = await admin_client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Project deleted successfully"}

    assert (await admin_client.get(f"/api/projects/{project['id']}")).status_code == 404
    assert (await admin_client.delete(f"/api/projects/{project['id']}")).status_code == 404


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_page_defaults_published(admin_client):
    response = await admin_client.post("/api/pages", json=PAGE)
    assert response.status_code == 201
    page = response.json()
    assert page["published"] is True
    assert page["createdAt"]
    assert page["updatedAt"]

    public = await admin_client.get("/api/page/about-me")
    assert public.status_code == 200
    assert public.json()["id"] == page["id"]


@pytest.mark.asyncio
async def test_unpublished_page_hidden_from_slug_lookup(admin_client):
    page = (await admin_client.post("/api/pages", json={**PAGE, "published": False})).json()

    by_id = await admin_client.get(f"/api/pages/{page['id']}")
    assert by_id.status_code == 200
    assert by_id.json()["published"] is False

    by_slug = await admin_client.get("/api/page/about-me")
    assert by_slug.status_code == 404

    listed = (await admin_client.get("/api/pages")).json()
    assert [p["id"] for p in listed] == [page["id"]]


@pytest.mark.asyncio
async def test_duplicate_slug_is_400(admin_client):
    original = (await admin_client.post("/api/pages", json=PAGE)).json()

    response = await admin_client.post("/api/pages", json={**PAGE, "title": "Impostor"})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Slug already in use"
    assert body["errors"][0]["field"] == "slug"

    fetched = (await admin_client.get(f"/api/pages/{original['id']}")).json()
    assert fetched == original


@pytest.mark.asyncio
async def test_update_page_to_taken_slug_is_400(admin_client):
    await admin_client.post("/api/pages", json=PAGE)
    other = (await admin_client.post("/api/pages", json={**PAGE, "slug": "contact"})).json()

    response = await admin_client.put(f"/api/pages/{other['id']}", json={"slug": "about-me"})
    assert response.status_code == 400
    assert (await admin_client.get(f"/api/pages/{other['id']}")).json()["slug"] == "contact"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override,field",
    [
        ({"title": ""}, "title"),
        ({"slug": ""}, "slug"),
        ({"slug": "About Me"}, "slug"),
        ({"slug": "about/me"}, "slug"),
        ({"content": "   "}, "content"),
    ],
)
async def test_create_page_validation(admin_client, override, field):
    response = await admin_client.post("/api/pages", json={**PAGE, **override})
    assert response.status_code == 400
    assert field in {error["field"] for error in response.json()["errors"]}


@pytest.mark.asyncio
async def test_page_update_is_partial_and_advances_updated_at(admin_client):
    page = (await admin_client.post("/api/pages", json=PAGE)).json()

    response = await admin_client.put(f"/api/pages/{page['id']}", json={"published": False})
    assert response.status_code == 200
    updated = response.json()
    assert updated["published"] is False
    for key in ("title", "slug", "content", "createdAt"):
        assert updated[key] == page[key]
    assert updated["updatedAt"] > page["updatedAt"]


@pytest.mark.asyncio
async def test_delete_page(admin_client):
    page = (await admin_client.post("/api/pages", json=PAGE)).json()

    response = await admin_client.delete(f"/api/pages/{page['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Page deleted successfully"}
    assert (await admin_client.get(f"/api/pages/{page['id']}")).status_code == 404
    assert (await admin_client.delete(f"/api/pages/{page['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_missing_page_lookups(async_client):
    assert (await async_client.get("/api/pages/nope")).status_code == 404
    assert (await async_client.get("/api/page/nope")).status_code == 404


# ---------------------------------------------------------------------------
# Settings and résumé
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_setting_upsert_via_api(admin_client):
    first = await admin_client.post("/api/settings", json={"key": "site_name", "value": "Jane"})
    assert first.status_code == 200
    second = await admin_client.post("/api/settings", json={"key": "site_name", "value": "J. Doe"})
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]

    settings = (await admin_client.get("/api/settings")).json()
    assert settings == [{"id": first.json()["id"], "key": "site_name", "value": "J. Doe"}]

    single = await admin_client.get("/api/settings/site_name")
    assert single.json()["value"] == "J. Doe"
    assert (await admin_client.get("/api/settings/missing")).status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"key": "", "value": "x"},
        {"key": "site_name", "value": ""},
        {"key": "site_name"},
        {"value": "x"},
    ],
)
async def test_setting_validation(admin_client, body):
    response = await admin_client.post("/api/settings", json=body)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_resume_url_roundtrip(admin_client):
    assert (await admin_client.get("/api/resume")).json() == {"resumeUrl": None}

    url = "https://drive.example.com/jane-cv.pdf"
    response = await admin_client.put("/api/resume", json={"resumeUrl": url})
    assert response.status_code == 200
    assert response.json() == {"message": "Resume URL updated successfully", "resumeUrl": url}

    assert (await admin_client.get("/api/resume")).json() == {"resumeUrl": url}

    settings = (await admin_client.get("/api/settings")).json()
    assert {"key": "resumeUrl", "value": url}.items() <= settings[0].items()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"resumeUrl": ""}, {"resumeUrl": "not a url"}])
async def test_resume_url_validation(admin_client, body):
    response = await admin_client.put("/api/resume", json=body)
    assert response.status_code == 400
    assert (await admin_client.get("/api/resume")).json() == {"resumeUrl": None}


@pytest.mark.asyncio
async def test_health(async_client):
    response = await async_client.get("/api/health")
    assert response.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Store failures
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_store_failure_is_opaque_500(async_client, monkeypatch):
    async def broken(self):
        raise OperationalError("SELECT * FROM projects", {}, Exception("disk I/O error at /var/db"))

    monkeypatch.setattr(ProjectRepository, "get_all_projects", broken)

    response = await async_client.get("/api/projects")
    assert response.status_code == 500
    assert response.json() == {"message": "Failed to fetch projects"}
    assert "disk" not in response.text
    assert "SELECT" not in response.text


@pytest.mark.asyncio
async def test_store_failure_on_write_is_opaque_500(admin_client, monkeypatch):
    async def broken(self, key, value):
        raise OperationalError("INSERT INTO settings", {}, Exception("database is locked"))

    monkeypatch.setattr(SettingRepository, "set_setting", broken)

    response = await admin_client.put(
        "/api/resume", json={"resumeUrl": "https://cv.example.com/jane.pdf"}
    )
    assert response.status_code == 500
    assert response.json() == {"message": "Failed to update resume URL"}
    assert "locked" not in response.text
    assert "INSERT" not in response.text
