"""Province/territory rule lookup."""

from __future__ import annotations

from canpay_engine.calculators.types import (
    JurisdictionRule,
    PayrollInputError,
    Province,
    RuleSet,
)


class UnknownJurisdictionError(PayrollInputError):
    """Raised when a province/territory is not in the rules table."""

    code = "UNKNOWN_JURISDICTION"

    def __init__(self, identifier: object):
        self.identifier = identifier
        super().__init__(f"Unknown province or territory: {identifier!r}")


class JurisdictionResolver:
    """Resolves a province identifier to its rule set.

    Accepted identifiers, matched case-insensitively:
    1. A ``Province`` member
    2. The two-letter code ("ON")
    3. The display name ("Ontario")

    There is no fallback jurisdiction; anything else raises
    ``UnknownJurisdictionError``.
    """

    def __init__(self, rules: RuleSet):
        self.rules = rules
        self._by_name = {
            rule.name.casefold(): rule for rule in rules.jurisdictions.values()
        }

    def resolve(self, identifier: Province | str) -> JurisdictionRule:
        """Return the rule for a province code, enum member or name.

        Raises:
            UnknownJurisdictionError: If nothing in the table matches
        """
        if isinstance(identifier, Province):
            rule = self.rules.jurisdictions.get(identifier)
            if rule is None:
                raise UnknownJurisdictionError(identifier)
            return rule

        if not isinstance(identifier, str):
            raise UnknownJurisdictionError(identifier)

        key = identifier.strip()
        try:
            province = Province(key.upper())
        except ValueError:
            province = None

        if province is not None and province in self.rules.jurisdictions:
            return self.rules.jurisdictions[province]

        rule = self._by_name.get(key.casefold())
        if rule is None:
            raise UnknownJurisdictionError(identifier)
        return rule

    def all(self) -> list[JurisdictionRule]:
        """All jurisdictions, ordered by code."""
        return sorted(self.rules.jurisdictions.values(), key=lambda r: r.code.value)
