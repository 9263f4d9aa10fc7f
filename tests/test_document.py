import dataclasses
import json
from datetime import datetime, timezone

import pytest

from webcrawler.storage.document import PageDocument


def test_document_defaults():
    doc = PageDocument(url="http://example.com", content="# Content", links=["http://example.com/link1"])
    assert doc.title == ""
    assert doc.description is None
    assert doc.raw_html is None
    assert doc.link_count == 1
    assert doc.content_length == 9
    assert doc.crawled_at.tzinfo is not None


def test_document_is_immutable():
    doc = PageDocument(url="http://example.com", content="content")
    with pytest.raises(dataclasses.FrozenInstanceError):
        doc.title = "changed"


def test_with_methods_return_copies():
    doc = PageDocument(url="http://example.com", content="content")
    updated = (doc.with_title("Test Title")
               .with_description("Test Description")
               .with_raw_html("<html></html>")
               .with_metadata("author", "John Doe")
               .with_metadata("lang", "en"))

    assert doc.title == ""
    assert doc.metadata == {}
    assert updated.title == "Test Title"
    assert updated.description == "Test Description"
    assert updated.raw_html == "<html></html>"
    assert updated.get_metadata("author") == "John Doe"
    assert updated.get_metadata("missing") is None
    assert len(updated.metadata) == 2


def test_to_dict_omits_unset_optionals():
    doc = PageDocument(url="http://example.com", content="content")
    data = doc.to_dict()
    assert "description" not in data
    assert "raw_html" not in data
    assert "metadata" not in data
    assert data["links"] == []
    assert data["url"] == "http://example.com"


def test_json_round_trip_keeps_fields():
    timestamp = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    doc = (PageDocument(url="http://example.com", content="test content", links=["http://example.com/a"])
           .with_title("Test")
           .with_description("About")
           .with_metadata("key", "value")
           .with_timestamp(timestamp))

    restored = PageDocument.from_json(doc.to_json())
    assert restored == doc


def test_from_dict_accepts_zulu_timestamps():
    doc = PageDocument.from_dict({
        "url": "http://example.com",
        "title": "T",
        "content": "c",
        "links": [],
        "crawled_at": "2024-05-01T12:30:00Z",
    })
    assert doc.crawled_at == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def test_to_json_pretty():
    doc = PageDocument(url="http://example.com", content="content")
    text = doc.to_json_pretty()
    assert "\n" in text
    assert json.loads(text)["url"] == "http://example.com"
    assert "\n" not in doc.to_json()
