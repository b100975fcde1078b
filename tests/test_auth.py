import httpx, pytest
from ideaprint.services import auth

def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))

def test_exchange_skipped_without_provider(monkeypatch):
    monkeypatch.setattr(auth.settings, "AUTH_TOKEN_URL", None)
    assert auth.exchange_code("abc") is None

def test_exchange_returns_token(monkeypatch):
    monkeypatch.setattr(auth.settings, "AUTH_TOKEN_URL", "https://auth.example/token")
    monkeypatch.setattr(auth.settings, "AUTH_CLIENT_ID", "ideaprint")
    seen = {}
    def handler(request):
        seen["body"] = request.content.decode()
        return httpx.Response(200, json={"access_token": "tok-123"})
    assert auth.exchange_code("abc", client=_client(handler))=="tok-123"
    assert "code=abc" in seen["body"] and "client_id=ideaprint" in seen["body"]

@pytest.mark.parametrize("response", [httpx.Response(400, json={"error": "invalid_grant"}),
                                      httpx.Response(200, json={})])
def test_exchange_failures(monkeypatch, response):
    monkeypatch.setattr(auth.settings, "AUTH_TOKEN_URL", "https://auth.example/token")
    with pytest.raises(auth.AuthExchangeError):
        auth.exchange_code("abc", client=_client(lambda request: response))

def test_callback_sets_session_cookie(client, monkeypatch):
    monkeypatch.setattr(auth, "exchange_code", lambda code: "tok-123")
    r = client.get("/api/auth/callback", params={"code": "abc", "redirect": "/tasks"}, follow_redirects=False)
    assert r.status_code==307 and r.headers["location"]=="/tasks"
    assert r.cookies.get("session")=="tok-123"

def test_safe_redirect():
    assert auth.safe_redirect(None)=="/dashboard"
    assert auth.safe_redirect("/idea/42?tab=tasks")=="/idea/42?tab=tasks"
    assert auth.safe_redirect("dashboard")=="/dashboard"

def test_admin_credentials():
    assert auth.validate_admin("admin", "s3cret")
    assert not auth.validate_admin("admin", "S3cret")
    assert not auth.validate_admin("ädmin", "s3cret")
