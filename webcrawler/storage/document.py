"""
Page document: the record produced for every successfully crawled page.
"""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PageDocument:
    """
    A crawled page ready for export.

    Documents are immutable; the ``with_*`` methods return a modified copy.
    """
    url: str
    content: str
    links: List[str] = field(default_factory=list)
    title: str = ""
    description: Optional[str] = None
    raw_html: Optional[str] = None
    crawled_at: datetime = field(default_factory=utc_now)
    metadata: Dict[str, str] = field(default_factory=dict)

    def with_title(self, title: str) -> 'PageDocument':
        return replace(self, title=title)

    def with_description(self, description: Optional[str]) -> 'PageDocument':
        return replace(self, description=description)

    def with_raw_html(self, html: str) -> 'PageDocument':
        return replace(self, raw_html=html)

    def with_metadata(self, key: str, value: str) -> 'PageDocument':
        return replace(self, metadata={**self.metadata, key: value})

    def with_timestamp(self, timestamp: datetime) -> 'PageDocument':
        return replace(self, crawled_at=timestamp)

    def get_metadata(self, key: str) -> Optional[str]:
        return self.metadata.get(key)

    @property
    def link_count(self) -> int:
        return len(self.links)

    @property
    def content_length(self) -> int:
        return len(self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization. Unset optional fields are left out."""
        data: Dict[str, Any] = {
            'url': self.url,
            'title': self.title,
        }
        if self.description is not None:
            data['description'] = self.description
        data['content'] = self.content
        if self.raw_html is not None:
            data['raw_html'] = self.raw_html
        data['links'] = list(self.links)
        data['crawled_at'] = self.crawled_at.isoformat()
        if self.metadata:
            data['metadata'] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PageDocument':
        """Create PageDocument from dictionary."""
        crawled_at = data.get('crawled_at')
        if isinstance(crawled_at, str):
            crawled_at = datetime.fromisoformat(crawled_at.replace('Z', '+00:00'))
        elif crawled_at is None:
            crawled_at = utc_now()

        return cls(
            url=data['url'],
            content=data.get('content', ''),
            links=list(data.get('links', [])),
            title=data.get('title', ''),
            description=data.get('description'),
            raw_html=data.get('raw_html'),
            crawled_at=crawled_at,
            metadata=dict(data.get('metadata', {}))
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_json_pretty(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    @classmethod
    def from_json(cls, text: str) -> 'PageDocument':
        return cls.from_dict(json.loads(text))
