"""External lookup links for authors."""

from typing import Optional
from urllib.parse import quote

from ..config.settings import settings

# Characters a browser's encodeURI leaves untouched besides alphanumerics and -_.~
_URI_SAFE = ";,/?:@&=+$!*'()#"


def scholar_lookup_url(full_name: str, base_url: Optional[str] = None) -> str:
    """Literature search link for an author name, URI-encoded."""
    base = base_url or settings.scholar_search_url
    return quote(f'{base}?q=author:"{full_name}"', safe=_URI_SAFE)
