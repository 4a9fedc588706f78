from alias_proxy.config import HostRule
from alias_proxy.rewrite.substitutor import rewrite_hosts, scheme

RULES = [HostRule(origin="origin.example", alias="alias.example")]


def test_scheme():
    assert scheme(True) == "https"
    assert scheme(False) == "http"


def test_http_origin_url_becomes_https_alias_url():
    result = rewrite_hosts('<a href="http://origin.example/x">', RULES, True)

    assert result == '<a href="https://alias.example/x">'
    assert "http://origin.example" not in result


def test_https_origin_url_becomes_http_alias_url():
    result = rewrite_hosts("https://origin.example/login", RULES, False)
    assert result == "http://alias.example/login"


def test_bare_hostname_is_replaced():
    result = rewrite_hosts("Domain=origin.example; Path=/", RULES, True)
    assert result == "Domain=alias.example; Path=/"


def test_all_occurrences_are_replaced():
    text = "http://origin.example/a https://origin.example/b origin.example //origin.example/c"

    result = rewrite_hosts(text, RULES, True)

    assert result == (
        "https://alias.example/a https://alias.example/b alias.example //alias.example/c"
    )


def test_no_word_boundaries():
    result = rewrite_hosts("sub.origin.example.org", RULES, True)
    assert result == "sub.alias.example.org"


def test_text_without_origin_is_unchanged():
    text = "nothing to see at other.example"
    assert rewrite_hosts(text, RULES, True) == text


def test_idempotent_when_aliases_do_not_match_origins():
    text = "see http://origin.example/page and origin.example"
    once = rewrite_hosts(text, RULES, True)
    assert rewrite_hosts(once, RULES, True) == once


def test_rules_apply_in_order():
    rules = [
        HostRule(origin="example.com", alias="a.test"),
        HostRule(origin="www.example.com", alias="b.test"),
    ]

    # The first rule already consumed the tail of www.example.com
    assert rewrite_hosts("http://www.example.com/", rules, False) == "http://www.a.test/"
    assert rewrite_hosts("http://www.example.com/", rules[::-1], False) == "http://b.test/"


def test_url_replacement_precedes_bare_replacement():
    rules = [HostRule(origin="origin.example", alias="alias.example")]

    # With the URL pass first the scheme follows alias_uses_https; a bare pass
    # first would have left "http://alias.example".
    assert rewrite_hosts("http://origin.example", rules, True) == "https://alias.example"


def test_later_rule_can_rewrite_earlier_alias():
    rules = [
        HostRule(origin="one.example", alias="two.example"),
        HostRule(origin="two.example", alias="three.example"),
    ]
    assert rewrite_hosts("one.example", rules, False) == "three.example"
