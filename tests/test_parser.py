from webcrawler.crawler.parser import (
    clean_markdown,
    decode_html_entities,
    extract_metadata,
    html_to_markdown,
)


def test_html_to_markdown_basic():
    result = html_to_markdown("<h1>Hello World</h1><p>This is a <strong>test</strong>.</p>")
    assert "# Hello World" in result
    assert "This is a **test**." in result


def test_html_to_markdown_keeps_link_text_and_lists():
    result = html_to_markdown('<a href="https://example.com">Example Link</a><ul><li>Item 1</li><li>Item 2</li></ul>')
    assert "Example Link" in result
    assert "Item 1" in result
    assert "Item 2" in result


def test_html_to_markdown_empty():
    assert html_to_markdown("") == ""
    assert html_to_markdown("   \n ") == ""
    assert html_to_markdown(None) == ""


def test_html_to_markdown_does_not_wrap_long_lines():
    sentence = " ".join(["word"] * 100)
    result = html_to_markdown(f"<p>{sentence}</p>")
    assert sentence in result


def test_clean_markdown_collapses_blank_lines():
    result = clean_markdown("Line 1\n\n\n\n\nLine 2")
    assert result == "Line 1\n\n\nLine 2"
    assert "\n\n\n\n" not in result


def test_clean_markdown_trims():
    assert clean_markdown("\n\n  Text  \n\n") == "Text"
    assert clean_markdown("a\n  \n\t\nb") == "a\n\n\nb"


def test_extract_metadata_complete():
    html = """
        <html>
            <head>
                <title>Page Title</title>
                <meta name="description" content="Page description">
                <meta name="keywords" content="keyword1, keyword2">
                <meta name="author" content="John Doe">
            </head>
        </html>
    """
    metadata = extract_metadata(html)
    assert metadata.title == "Page Title"
    assert metadata.description == "Page description"
    assert metadata.keywords == "keyword1, keyword2"
    assert metadata.author == "John Doe"
    assert metadata.other == {}


def test_extract_metadata_partial():
    html = "<html><head><title>  Page   Title </title><meta name='Description' content='Only this'></head></html>"
    metadata = extract_metadata(html)
    assert metadata.title == "Page Title"
    assert metadata.description == "Only this"
    assert metadata.keywords is None
    assert metadata.author is None


def test_extract_metadata_missing():
    metadata = extract_metadata("<html><head></head><body>hi</body></html>")
    assert metadata.title is None
    assert metadata.description is None
    assert extract_metadata("").title is None


def test_extract_metadata_custom_tags():
    metadata = extract_metadata('<meta name="custom-tag" content="custom value"><meta property="og:title" content="ignored">')
    assert metadata.other == {"custom-tag": "custom value"}


def test_extract_metadata_decodes_entities():
    html = ("<title>Tom &amp; Jerry &lt;3</title>"
            "<meta name=\"description\" content=\"&quot;quoted&quot; &#39;single&#39; &#x27;hex&#x27;\">")
    metadata = extract_metadata(html)
    assert metadata.title == "Tom & Jerry <3"
    assert metadata.description == "\"quoted\" 'single' 'hex'"


def test_decode_html_entities():
    text = "Test &amp; Example &lt;tag&gt; &quot;quoted&quot; &#39;apostrophe&#39;"
    assert decode_html_entities(text) == "Test & Example <tag> \"quoted\" 'apostrophe'"


def test_extract_metadata_decodes_entities_once():
    html = ("<title>Use &amp;lt;br&amp;gt; tags</title>"
            "<meta name=\"description\" content=\"Write &amp;amp; not &amp;\">")
    metadata = extract_metadata(html)
    assert metadata.title == "Use &lt;br&gt; tags"
    assert metadata.description == "Write &amp; not &"
