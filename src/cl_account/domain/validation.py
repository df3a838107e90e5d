"""Account identity rules: pph and legal accounts carry disjoint field sets."""

from src.cl_common.enums import AccountKind
from src.cl_common.errors import InvalidAccountError


def validate_account_identity(
    kind: AccountKind,
    username: str | None,
    website_url: str | None,
    name: str | None,
    deposit_amount: int | None,
) -> None:
    """Raise InvalidAccountError unless the fields match the account kind."""
    if kind == AccountKind.PPH:
        if not username or not website_url:
            raise InvalidAccountError("pph accounts require username and website_url")
        if name is not None or deposit_amount is not None:
            raise InvalidAccountError(
                "pph accounts cannot carry name or deposit_amount_cents"
            )
        return

    if not name or deposit_amount is None:
        raise InvalidAccountError("legal accounts require name and deposit_amount_cents")
    if deposit_amount < 0:
        raise InvalidAccountError("deposit_amount_cents must be >= 0")
    if username is not None or website_url is not None:
        raise InvalidAccountError("legal accounts cannot carry username or website_url")
