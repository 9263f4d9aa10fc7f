from webcrawler.crawler.link_resolver import (
    clean_url,
    extract_links,
    find_links,
    is_valid_link,
    parse_base_url,
    resolve_path,
    resolve_url,
)


def test_is_valid_link_accepts_crawlable_references():
    for ref in ("http://example.com", "https://example.com", "/about", "../page.html", "page.html"):
        assert is_valid_link(ref)


def test_is_valid_link_rejects_non_navigable_references():
    for ref in ("#section", "javascript:void(0)", "mailto:test@example.com",
                "tel:+1234567890", "data:image/png;base64,123", "", "   ", "JavaScript:alert(1)"):
        assert not is_valid_link(ref)


def test_resolve_absolute_urls_are_kept():
    base = "http://example.com"
    assert resolve_url("http://other.com/page", base) == "http://other.com/page"
    assert resolve_url("https://secure.com/page#top", base) == "https://secure.com/page"


def test_resolve_absolute_path():
    assert resolve_url("/about", "http://example.com/some/path") == "http://example.com/about"
    assert resolve_url("/contact/us", "http://example.com/some/path") == "http://example.com/contact/us"


def test_resolve_relative_to_directory():
    assert resolve_url("contact.html", "http://example.com/blog/") == "http://example.com/blog/contact.html"
    assert resolve_url("post.html", "http://example.com/blog/index.html") == "http://example.com/blog/post.html"
    assert resolve_url("page", "http://example.com") == "http://example.com/page"


def test_resolve_parent_directories():
    base = "http://example.com/a/b/c/"
    assert resolve_url("../page.html", base) == "http://example.com/a/b/page.html"
    assert resolve_url("../../page.html", base) == "http://example.com/a/page.html"
    # never climbs above the root
    assert resolve_url("../../../../../page.html", base) == "http://example.com/page.html"


def test_resolve_protocol_relative():
    assert resolve_url("//cdn.example.com/f.js", "https://example.com") == "https://cdn.example.com/f.js"
    assert resolve_url("//cdn.example.com/f.js", "http://example.com") == "http://cdn.example.com/f.js"


def test_resolve_keeps_port_of_base():
    assert resolve_url("/x", "http://example.com:8080/page") == "http://example.com:8080/x"


def test_resolve_fails_without_base_scheme():
    assert resolve_url("page.html", "example.com/index.html") is None
    assert resolve_url("/about", "not a url") is None


def test_parse_base_url():
    assert parse_base_url("http://example.com/path/to/page.html") == ("http", "example.com", "/path/to/page.html")
    assert parse_base_url("http://example.com") == ("http", "example.com", "/")
    assert parse_base_url("http://example.com:8080/page") == ("http", "example.com:8080", "/page")
    assert parse_base_url("example.com/page") is None


def test_resolve_path():
    assert resolve_path("http://example.com/a/b/../c") == "http://example.com/a/c"
    assert resolve_path("http://example.com/a/b/../../c") == "http://example.com/c"
    assert resolve_path("http://example.com/a/./b") == "http://example.com/a/b"
    assert resolve_path("http://example.com/./a//b") == "http://example.com/a/b"
    assert resolve_path("http://example.com") == "http://example.com"
    assert resolve_path("no-scheme/a/../b") == "no-scheme/a/../b"


def test_clean_url():
    assert clean_url("  http://example.com/page#section  ") == "http://example.com/page"
    assert clean_url("http://example.com/page") == "http://example.com/page"


def test_extract_links_filters_invalid_references():
    html = """
        <html><body>
            <a href="/about">About</a>
            <a href="#top">Top</a>
            <a href="javascript:void(0)">Click</a>
        </body></html>
    """
    assert extract_links(html, "http://example.com") == {"http://example.com/about"}


def test_extract_links_deduplicates():
    html = """
        <a href="/about">About</a>
        <a href="/about#team">Team</a>
        <a href='http://example.com/about'>Again</a>
        <a href="https://external.com">External</a>
    """
    links = extract_links(html, "http://example.com/")
    assert links == {"http://example.com/about", "https://external.com"}


def test_extract_links_tolerates_broken_markup():
    html = '<div><a class="nav" HREF = "page2.html">next<p><a href="mailto:x@y.z">mail</div>'
    assert extract_links(html, "http://example.com/docs/page1.html") == {"http://example.com/docs/page2.html"}


def test_extract_links_empty_input():
    assert extract_links("", "http://example.com") == set()
    assert extract_links(None, "http://example.com") == set()
    assert extract_links("<p>no links here</p>", "http://example.com") == set()


def test_find_links_preserves_document_order():
    html = '<a href="/c">c</a><a href="/a">a</a><a href="/c">c again</a><a href="/b">b</a>'
    assert find_links(html, "http://example.com") == [
        "http://example.com/c",
        "http://example.com/a",
        "http://example.com/b",
    ]
