"""URL building for routing a query to a search page."""

from urllib.parse import quote, unquote, urlencode, urlsplit, urlunsplit

from config.config import PageOpenBehavior, QueryPathBehavior

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def decode_uri_component(text: str | None) -> str:
    """Decode a percent-encoded input value; malformed sequences are kept as-is."""
    if not text:
        return ""
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError:
        return text


def browsing_target(behavior: PageOpenBehavior) -> str:
    return "_blank" if PageOpenBehavior(behavior) == PageOpenBehavior.NEW_TAB else "_self"


def build_search_url(
    page_url: str,
    query_text: str,
    query_path_behavior: QueryPathBehavior = QueryPathBehavior.QUERY_PARAMETER,
    query_string_parameter: str = "q",
) -> str:
    """
    Build the destination URL for a query.

    Fragment mode replaces the fragment with the percent-encoded text.
    Query parameter mode appends `parameter=text` (form-encoded) and keeps any
    existing parameters and fragment.

    Raises:
        ValueError: If page_url is not an absolute URL
    """
    parts = urlsplit(page_url)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"Search page URL must be absolute: {page_url!r}")

    path = parts.path or "/"
    if QueryPathBehavior(query_path_behavior) == QueryPathBehavior.URL_FRAGMENT:
        return urlunsplit((parts.scheme, parts.netloc, path, parts.query, encode_uri_component(query_text)))

    if not query_string_parameter:
        raise ValueError("query_string_parameter is required in query parameter mode")
    appended = urlencode({query_string_parameter: query_text})
    query = f"{parts.query}&{appended}" if parts.query else appended
    return urlunsplit((parts.scheme, parts.netloc, path, query, parts.fragment))
