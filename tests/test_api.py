from ideaprint.main import app

def _create(client, headers, blueprint, title="Task Tracker"):
    r = client.post("/api/ideas", headers=headers,
                    json={"title": title, "description": "A tool for teams", "blueprint": blueprint.dump()})
    assert r.status_code==200, r.text
    return r.json()["data"]["idea"]

def test_requires_user(client):
    r = client.get("/api/ideas")
    assert r.status_code==401
    assert r.json()=={"error": "You must be logged in to use this API"}

def test_idea_lifecycle(client, headers, blueprint):
    idea = _create(client, headers, blueprint)
    assert idea["title"]=="Task Tracker" and idea["validationScore"]==blueprint.validation.score

    listed = client.get("/api/ideas", headers=headers).json()["data"]
    assert [p["id"] for p in listed]==[idea["id"]]
    assert listed[0]["progress"]==100 and listed[0]["status"]=="completed"

    got = client.get(f"/api/ideas/{idea['id']}", headers=headers).json()["data"]
    assert got["blueprint"]["validation"]["pillars"]==blueprint.dump()["validation"]["pillars"]

    r = client.get(f"/api/ideas/{idea['id']}", headers={"X-User-Id": "someone-else"})
    assert r.status_code==403 and r.json()["code"]=="42501"

    assert client.delete(f"/api/ideas/{idea['id']}", headers=headers).json()=={"success": True}
    r = client.get(f"/api/ideas/{idea['id']}", headers=headers)
    assert r.status_code==404

def test_create_idea_validation(client, headers):
    r = client.post("/api/ideas", headers=headers, json={"title": " ", "description": "A tool for teams"})
    assert r.status_code==400 and "Title is required" in r.json()["error"]
    r = client.post("/api/ideas", headers=headers, json={"description": "no title"})
    assert r.status_code==400 and r.json()["error"]=="Invalid request body"

def test_save_blueprint_accepts_camel_case(client, headers, blueprint):
    idea = _create(client, headers, blueprint)
    r = client.put(f"/api/ideas/{idea['id']}/blueprint", headers=headers,
                   json={"techStack": {"frontend": ["Svelte"]}, "userFlow": "graph LR"})
    assert r.status_code==200 and r.json()["data"]["ideaId"]==idea["id"]
    got = client.get(f"/api/ideas/{idea['id']}", headers=headers).json()["data"]["blueprint"]
    assert got["techStack"]["frontend"]==["Svelte"] and got["userFlow"]=="graph LR"

def test_task_board(client, headers, blueprint):
    idea = _create(client, headers, blueprint)
    cols = client.get("/api/tasks", headers=headers).json()["data"]
    assert list(cols)==["Todo", "In Progress", "Done"] and len(cols["Todo"])==3
    first = cols["Todo"][0]
    assert first["id"]==f"{idea['id']}-task-0" and first["project"]=="Task Tracker"

    r = client.patch(f"/api/tasks/{first['id']}", headers=headers, json={"status": "Done"})
    assert r.status_code==200
    done = client.get("/api/tasks", headers=headers, params={"status": "Done"}).json()["data"]
    assert [t["id"] for t in done]==[first["id"]]

    r = client.patch(f"/api/tasks/{first['id']}", headers=headers, json={"status": "Blocked"})
    assert r.status_code==400
    r = client.patch("/api/tasks/garbage", headers=headers, json={"status": "Done"})
    assert r.status_code==400
    r = client.patch(f"/api/tasks/{idea['id']}-task-7", headers=headers, json={"status": "Done"})
    assert r.status_code==404

    assert client.delete(f"/api/tasks/{first['id']}", headers=headers).status_code==200
    cols = client.get("/api/tasks", headers=headers).json()["data"]
    assert sum(len(v) for v in cols.values())==2

def test_dashboard(client, headers, blueprint):
    _create(client, headers, blueprint)
    _create(client, headers, blueprint, title="Second idea")
    r = client.get("/api/dashboard", headers=headers)
    assert r.json()["data"]=={"total": 2, "inProgress": 0, "completed": 2}

def test_callback_redirects(client):
    r = client.get("/api/auth/callback", params={"code": "abc"}, follow_redirects=False)
    assert r.status_code==307 and r.headers["location"]=="/dashboard"
    r = client.get("/api/auth/callback", params={"redirect": "/projects/1"}, follow_redirects=False)
    assert r.headers["location"]=="/projects/1"
    for bad in ("https://evil.example", "//evil.example", "javascript:alert(1)"):
        r = client.get("/api/auth/callback", params={"redirect": bad}, follow_redirects=False)
        assert r.headers["location"]=="/dashboard"

def test_admin_login_and_diagnostics(client):
    assert client.post("/api/admin/login", json={"username": "admin"}).status_code==400
    assert client.post("/api/admin/login", json={"username": "admin", "password": "nope"}).status_code==401
    assert client.get("/api/admin/diagnostics").status_code==401
    r = client.post("/api/admin/login", json={"username": "admin", "password": "s3cret"})
    assert r.status_code==200 and "admin-session" in r.cookies
    report = client.get("/api/admin/diagnostics", params={"check_user": "diag"}).json()
    assert report["connection"]["connected"] is True
    assert report["tables"]["success"] is True
    assert report["permissions"]["success"] is True

def test_healthz_and_schemas(client):
    assert client.get("/healthz").json()=={"status": "ok"}
    schemas = client.get("/schemas").json()
    assert "techStack" in schemas["blueprint"]["properties"]
    assert app.state.store.verify_tables()["success"]

def test_run_serves_app(monkeypatch):
    import uvicorn
    from ideaprint import main
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda target, **kw: calls.append((target, kw)))
    main.run()
    assert calls==[("ideaprint.main:app", {"host": "127.0.0.1", "port": 8000})]
