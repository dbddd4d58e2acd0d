from quotebook.render import autolink, is_image_url, quote_html


def test_is_image_url():
    assert is_image_url("https://example.com/cat.png")
    assert is_image_url("http://example.com/a/b.JPG")
    assert is_image_url("https://example.com/cat.jpeg")
    assert is_image_url("https://example.com/cat.gif?size=large")
    assert not is_image_url("https://example.com/page")
    assert not is_image_url("check this out: https://example.com/cat.png")
    assert not is_image_url("ftp://example.com/cat.png")
    assert not is_image_url("cat.png")
    assert not is_image_url("")


def test_quote_html_image():
    html = quote_html("https://example.com/cat.png")
    assert html == '<img src="https://example.com/cat.png" class="img img-fluid" style="max-height: 400px;">'


def test_quote_html_link():
    html = quote_html("check this out: https://example.com/page")
    assert "<img" not in html
    assert html == (
        'check this out: <a href="https://example.com/page" rel="nofollow noopener" '
        'target="_blank">https://example.com/page</a>'
    )


def test_autolink_trailing_punctuation():
    html = autolink("see https://example.com/page.")
    assert html.endswith('>https://example.com/page</a>.')


def test_quote_html_escapes_user_html():
    html = quote_html('<script>alert("x")</script>')
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_quote_html_escapes_url_attributes():
    html = quote_html('https://example.com/a.png"onerror="alert(1)')
    assert 'onerror="' not in html


def test_quote_html_line_breaks():
    assert quote_html("one\r\ntwo\nthree") == "one<br>two<br>three"
