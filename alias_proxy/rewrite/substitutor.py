"""
Origin -> alias string substitution.

Applied identically to header values and decoded body text. For each rule, in
rule order, full URLs of the origin (both http and https) are replaced with the
alias URL first, then any remaining bare mention of the origin host is replaced
with the alias host. Replacement is plain global substring replacement; the
ordering of both the rules and the two phases is observable when hostnames
overlap, so neither is rearranged.
"""

from typing import Sequence

from alias_proxy.config import HostRule

ORIGIN_SCHEMES = ("http", "https")


def scheme(https: bool) -> str:
    return "https" if https else "http"


def rewrite_hosts(text: str, rules: Sequence[HostRule], alias_uses_https: bool) -> str:
    alias_scheme = scheme(alias_uses_https)
    for rule in rules:
        alias_url = f"{alias_scheme}://{rule.alias}"
        for origin_scheme in ORIGIN_SCHEMES:
            text = text.replace(f"{origin_scheme}://{rule.origin}", alias_url)
        text = text.replace(rule.origin, rule.alias)
    return text
