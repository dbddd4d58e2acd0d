import re
from datetime import datetime, timezone

from quotebook.csrf import issue_token
from quotebook.forms import PASSWORD_INCORRECT, SchemaError
from quotebook.models import Quote
from quotebook.store import QuoteStore

TEST_PASSWORD = "password"


def _csrf(client) -> str:
    resp = client.get("/add-quote")
    match = re.search(r'name="csrf_token" value="([^"]+)"', resp.text)
    assert match
    return match.group(1)


def _submit(client, **fields):
    data = {
        "csrf_token": _csrf(client),
        "WhoSaidTheSillyThing": "Bob",
        "WhatSillyThingDidTheySay": "hello there",
        "WhatIsThePassword": TEST_PASSWORD,
    }
    data.update(fields)
    return client.post("/submit", data=data, follow_redirects=False)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_startup_creates_quotes_folder(client, settings):
    assert settings.quotes_folder.is_dir()


def test_index_empty(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "No quotes yet." in resp.text
    assert 'href="/add-quote"' in resp.text


def test_add_quote_page(client):
    resp = client.get("/add-quote")
    assert resp.status_code == 200
    assert "Submit a Quote" in resp.text
    assert 'name="WhoSaidTheSillyThing"' in resp.text
    assert 'name="WhatSillyThingDidTheySay"' in resp.text
    assert 'type="password"' in resp.text
    assert 'name="csrf_token"' in resp.text
    assert 'name="Time"' not in resp.text


def test_submit_saves_quote(client, settings):
    resp = _submit(client)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/"

    [quote] = QuoteStore(settings.quotes_folder).list()
    assert quote.who_said == "Bob"
    assert quote.what_said == "hello there"
    assert quote.time is not None

    index = client.get("/")
    assert "hello there" in index.text
    assert "Bob" in index.text


def test_submit_wrong_password(client, settings):
    resp = _submit(client, WhatIsThePassword="wrongpass")
    assert resp.status_code == 400
    assert PASSWORD_INCORRECT in resp.text
    assert "is-invalid" in resp.text
    # submitted text survives the re-render, the password does not
    assert "hello there" in resp.text
    assert "wrongpass" not in resp.text
    assert not list(settings.quotes_folder.iterdir())


def test_submit_without_csrf(client, settings):
    resp = client.post(
        "/submit",
        data={"WhoSaidTheSillyThing": "Bob", "WhatSillyThingDidTheySay": "x", "WhatIsThePassword": TEST_PASSWORD},
    )
    assert resp.status_code == 403
    assert not list(settings.quotes_folder.iterdir())


def test_submit_with_foreign_csrf(client):
    from quotebook.config import Settings

    token = issue_token(Settings(secret_key="someone-else"))
    resp = _submit(client, csrf_token=token)
    assert resp.status_code == 403


def test_index_renders_image_and_link(client, settings):
    store = QuoteStore(settings.quotes_folder)
    store.save(Quote(time=datetime(2020, 1, 1, tzinfo=timezone.utc), who_said="A", what_said="https://example.com/cat.png"))
    store.save(
        Quote(
            time=datetime(2020, 1, 2, tzinfo=timezone.utc),
            who_said="B",
            what_said="check this out: https://example.com/page",
        )
    )

    text = client.get("/").text
    assert '<img src="https://example.com/cat.png"' in text
    assert '<a href="https://example.com/page"' in text
    assert text.index("check this out") < text.index("cat.png")


def test_index_escapes_author_and_body(client, settings):
    QuoteStore(settings.quotes_folder).save(
        Quote(time=datetime(2020, 1, 1, tzinfo=timezone.utc), who_said="<b>Eve</b>", what_said="<i>hi</i>")
    )
    text = client.get("/").text
    assert "<b>Eve</b>" not in text
    assert "&lt;b&gt;Eve&lt;/b&gt;" in text
    assert "<i>hi</i>" not in text
    assert "&lt;i&gt;hi&lt;/i&gt;" in text


def test_index_broken_store(client, settings):
    (settings.quotes_folder / "broken.json").write_text("{not json")
    resp = client.get("/")
    assert resp.status_code == 500
    assert resp.text == "oh god its broken"


def test_schema_error_is_internal_error(client, monkeypatch):
    import quotebook.routes as routes

    def broken(*args, **kwargs):
        raise SchemaError("misconfigured")

    monkeypatch.setattr(routes, "encode", broken)
    resp = client.get("/add-quote")
    assert resp.status_code == 500
    assert resp.text == "internal error"


def test_submit_csrf_token_as_file(client, settings):
    resp = client.post(
        "/submit",
        data={"WhoSaidTheSillyThing": "Bob", "WhatSillyThingDidTheySay": "x", "WhatIsThePassword": TEST_PASSWORD},
        files={"csrf_token": ("token.txt", b"not a token")},
    )
    assert resp.status_code == 403
    assert not list(settings.quotes_folder.iterdir())
