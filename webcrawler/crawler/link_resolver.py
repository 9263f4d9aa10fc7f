"""
Link resolution for crawled pages.

Extracts anchor targets from HTML, filters out references that cannot be
crawled and resolves the rest against the page URL into absolute,
fragment-free URLs. Everything in this module is pure: no network access
and no frontier state.
"""

from typing import List, Optional, Set, Tuple

from bs4 import BeautifulSoup, SoupStrainer


# Only anchors with an href are parsed (much faster than a full soup)
LINK_STRAINER = SoupStrainer('a', href=True)

NON_NAVIGABLE_SCHEMES = ('javascript:', 'mailto:', 'tel:', 'data:')


def find_links(html: Optional[str], base_url: str) -> List[str]:
    """
    Extract crawlable links from HTML in document order.

    Args:
        html: Raw page markup
        base_url: URL the markup was fetched from

    Returns:
        Unique absolute URLs, in the order they first appear on the page
    """
    if not html:
        return []

    soup = BeautifulSoup(html, 'lxml', parse_only=LINK_STRAINER)

    links = []
    seen: Set[str] = set()
    for anchor in soup.find_all('a', href=True):
        href = anchor['href']
        if isinstance(href, list):
            href = ' '.join(href)
        href = href.strip()

        if not is_valid_link(href):
            continue

        absolute_url = resolve_url(href, base_url)
        if absolute_url and absolute_url not in seen:
            seen.add(absolute_url)
            links.append(absolute_url)

    return links


def extract_links(html: Optional[str], base_url: str) -> Set[str]:
    """Extract the set of absolute URLs linked from a page."""
    return set(find_links(html, base_url))


def is_valid_link(reference: str) -> bool:
    """Check if an href is worth resolving (not empty, an anchor or a script/mail/tel/data link)."""
    reference = reference.strip()
    if not reference or reference.startswith('#'):
        return False
    return not reference.lower().startswith(NON_NAVIGABLE_SCHEMES)


def resolve_url(reference: str, base_url: str) -> Optional[str]:
    """
    Resolve a link reference against the URL of the page it was found on.

    Handles absolute URLs, protocol-relative references (``//host/path``),
    absolute paths (``/path``) and paths relative to the base directory,
    including ``.`` and ``..`` segments.

    Args:
        reference: Raw href value
        base_url: Absolute URL of the containing page

    Returns:
        Absolute URL without fragment, or None if the base URL cannot be parsed
    """
    reference = reference.strip()
    base_url = base_url.strip()

    if reference.lower().startswith(('http://', 'https://')):
        return clean_url(reference)

    if reference.startswith('//'):
        scheme = 'https:' if base_url.lower().startswith('https://') else 'http:'
        return clean_url(scheme + reference)

    parsed = parse_base_url(base_url)
    if parsed is None:
        return None
    scheme, host, base_path = parsed

    if reference.startswith('/'):
        return clean_url(f"{scheme}://{host}{reference}")

    # Relative to the directory of the base path
    if base_path.endswith('/'):
        base_dir = base_path
    else:
        base_dir = base_path.rsplit('/', 1)[0] + '/'

    return clean_url(resolve_path(f"{scheme}://{host}{base_dir}{reference}"))


def parse_base_url(base_url: str) -> Optional[Tuple[str, str, str]]:
    """Split a URL into (scheme, host[:port], path); the path defaults to '/'."""
    scheme, separator, rest = base_url.partition('://')
    if not separator:
        return None

    slash = rest.find('/')
    if slash == -1:
        return scheme, rest, '/'
    return scheme, rest[:slash], rest[slash:]


def resolve_path(url: str) -> str:
    """
    Collapse '.', '..' and empty segments in the path of an absolute URL.

    '..' never climbs above the root of the path.
    """
    scheme_end = url.find('://')
    if scheme_end == -1:
        return url

    slash = url.find('/', scheme_end + 3)
    if slash == -1:
        return url

    prefix, path = url[:slash], url[slash:]

    resolved: List[str] = []
    for part in path.split('/'):
        if part in ('', '.'):
            if not resolved:
                resolved.append('')
        elif part == '..':
            if len(resolved) > 1:
                resolved.pop()
        else:
            resolved.append(part)

    return prefix + '/'.join(resolved)


def clean_url(url: str) -> str:
    """Drop the fragment and surrounding whitespace from a URL."""
    return url.split('#', 1)[0].strip()
