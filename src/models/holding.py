"""On-chain token holding as reported by the Solana RPC."""

from pydantic import BaseModel, ConfigDict, computed_field


class TokenHolding(BaseModel):
    """One SPL token account owned by the scanned wallet.

    Mint-level fields (supply, authorities) are filled from the mint account
    and stay None when the mint lookup was unavailable.
    """

    model_config = ConfigDict(frozen=True)

    mint: str
    amount: int  # raw base units
    decimals: int
    token_account: str = ""
    owner: str = ""
    program: str = "spl-token"  # "spl-token" or "spl-token-2022"
    delegate: str | None = None
    delegated_amount: int | None = None
    close_authority: str | None = None

    # From the mint account
    supply: int | None = None  # raw base units
    mint_authority: str | None = None
    freeze_authority: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ui_amount(self) -> float:
        return self.amount / 10**self.decimals

    @property
    def ui_supply(self) -> float | None:
        if self.supply is None:
            return None
        return self.supply / 10**self.decimals

    @property
    def is_nft(self) -> bool:
        """Exactly one indivisible unit. Other zero-decimal holdings are fungible."""
        return self.decimals == 0 and self.ui_amount == 1

    @property
    def has_delegate(self) -> bool:
        return bool(self.delegate)
