import pytest

from config.config import PageOpenBehavior, QueryPathBehavior
from utils.url_helper import browsing_target, build_search_url, decode_uri_component, encode_uri_component


def test_encode_matches_uri_component_rules():
    assert encode_uri_component("a b&c/d") == "a%20b%26c%2Fd"
    assert encode_uri_component("it's (fine)!") == "it's%20(fine)!"
    assert encode_uri_component("café") == "caf%C3%A9"


def test_decode_percent_encoded_value():
    assert decode_uri_component("red%20shoes") == "red shoes"
    assert decode_uri_component(None) == ""


def test_decode_keeps_malformed_value():
    assert decode_uri_component("%E0%A4%A") == "%E0%A4%A"


def test_fragment_mode_replaces_fragment():
    url = build_search_url(
        "https://contoso.com/search.aspx#old",
        "red shoes",
        query_path_behavior=QueryPathBehavior.URL_FRAGMENT,
    )
    assert url == "https://contoso.com/search.aspx#red%20shoes"


def test_query_mode_appends_parameter():
    assert build_search_url("https://contoso.com/search.aspx", "a&b") == "https://contoso.com/search.aspx?q=a%26b"


def test_query_mode_keeps_existing_query_and_fragment():
    url = build_search_url("https://contoso.com/search?lang=en#results", "cat", query_string_parameter="k")
    assert url == "https://contoso.com/search?lang=en&k=cat#results"


def test_bare_host_gets_root_path():
    assert build_search_url("https://contoso.com", "cat") == "https://contoso.com/?q=cat"


def test_relative_page_url_is_rejected():
    with pytest.raises(ValueError):
        build_search_url("/search.aspx", "cat")


def test_browsing_target():
    assert browsing_target(PageOpenBehavior.NEW_TAB) == "_blank"
    assert browsing_target(PageOpenBehavior.SAME_TAB) == "_self"
    assert browsing_target("newTab") == "_blank"
