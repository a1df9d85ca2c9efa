"""Fatal error conditions.

Every error here aborts processing of the affected security (or of the
whole run when raised while reading input).
"""


class CostBasisError(ValueError):
    """Base class for malformed or inconsistent input."""


class DateParseError(CostBasisError):
    """A date string could not be recognized."""


class QifFormatError(CostBasisError):
    """The QIF export is not an investment account file or has a bad line."""


class SupplementError(CostBasisError):
    """A supplemental sale confirmation could not be read or matched."""


class MissingPriceError(CostBasisError):
    """A sale still has no price after merging supplemental confirmations."""


class LedgerError(CostBasisError):
    """A transaction cannot be applied to the holdings."""


class OversellError(LedgerError):
    """A sale asks for more shares than are held."""
