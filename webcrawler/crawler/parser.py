"""
Web page parser: markdown conversion and head metadata extraction.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

import html2text
from bs4 import BeautifulSoup


logger = logging.getLogger(__name__)

WHITESPACE_PATTERN = re.compile(r'\s+')

# Entities handled by decode_html_entities; &amp; must come last
HTML_ENTITIES = (
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
    ('&#39;', "'"),
    ('&#x27;', "'"),
    ('&amp;', '&'),
)


@dataclass
class PageMetadata:
    """Metadata found in the head section of a page."""
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    author: Optional[str] = None
    other: Dict[str, str] = field(default_factory=dict)


def html_to_markdown(html: Optional[str]) -> str:
    """
    Convert HTML to markdown text.

    Lines are not wrapped, images are dropped and runs of blank lines are
    collapsed by ``clean_markdown``.

    Args:
        html: Raw HTML content

    Returns:
        Markdown text, empty for empty input
    """
    if not html or not html.strip():
        return ""

    converter = html2text.HTML2Text()
    converter.body_width = 0
    converter.ignore_images = True
    converter.ignore_links = False
    converter.ignore_emphasis = False

    return clean_markdown(converter.handle(html))


def clean_markdown(markdown: str) -> str:
    """Collapse runs of blank lines to at most two and trim the result."""
    lines = []
    blank_count = 0

    for line in markdown.splitlines():
        if line.strip():
            blank_count = 0
            lines.append(line)
        else:
            blank_count += 1
            if blank_count <= 2:
                lines.append('')

    return '\n'.join(lines).strip()


def decode_html_entities(text: str) -> str:
    """Decode the common HTML entities."""
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return text


def _clean_text(text: str) -> str:
    """Collapse whitespace. BeautifulSoup has already decoded entities."""
    if not text:
        return ""
    return WHITESPACE_PATTERN.sub(' ', text.strip())


def extract_metadata(html: Optional[str]) -> PageMetadata:
    """
    Extract title and named meta tags from HTML.

    Missing tags leave the matching field as None. Meta tags other than
    description, keywords and author are kept in ``other`` under their
    original name.
    """
    metadata = PageMetadata()
    if not html:
        return metadata

    soup = BeautifulSoup(html, 'lxml')

    title_tag = soup.find('title')
    if title_tag:
        title = _clean_text(title_tag.get_text())
        metadata.title = title or None

    for meta in soup.find_all('meta', attrs={'name': True, 'content': True}):
        name = meta.get('name').strip()
        content = _clean_text(meta.get('content'))
        if not name:
            continue

        name_lower = name.lower()
        if name_lower == 'description':
            metadata.description = content
        elif name_lower == 'keywords':
            metadata.keywords = content
        elif name_lower == 'author':
            metadata.author = content
        else:
            metadata.other[name] = content

    logger.debug(f"Extracted metadata: title={metadata.title!r}, {len(metadata.other)} extra meta tags")
    return metadata
