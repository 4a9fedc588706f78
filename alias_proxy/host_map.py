from typing import Dict, Sequence

from alias_proxy.config import HostRule
from alias_proxy.errors import HostNotMapped


class HostMap:
    """Exact, case-sensitive alias -> origin lookup built once from the rule list."""

    def __init__(self, rules: Sequence[HostRule]):
        self._origins: Dict[str, str] = {}
        for rule in rules:
            # first rule for an alias wins
            self._origins.setdefault(rule.alias, rule.origin)

    def resolve_origin(self, alias_host: str) -> str:
        try:
            return self._origins[alias_host]
        except KeyError:
            raise HostNotMapped(alias_host) from None

    def __contains__(self, alias_host: str) -> bool:
        return alias_host in self._origins

    def __len__(self) -> int:
        return len(self._origins)
