"""
Rate/Fee Table

Per-venue reference data about assets, keyed by asset symbol:

- transfer fees (fixed amount or percentage, see TransferFee)
- confirmation times (expected settlement latency in minutes)
- display names ("BTC" -> "Bitcoin")

A ReferenceData instance is an immutable snapshot. A venue's metadata
refresh builds a new one and swaps it in whole, so readers never see a
half-updated table.

Missing entries are normal (new listings, delisted assets): every lookup
returns None for an unknown symbol instead of raising.
"""

from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.schemas import TransferFee


class ReferenceData(BaseModel):
    """
    Snapshot of one venue's asset reference data.

    Example:
        >>> data = ReferenceData(
        ...     transfer_fees={"BTC": "0.001", "XRP": "2%"},
        ...     confirmation_times={"BTC": 60},
        ...     names={"BTC": "Bitcoin"},
        ... )
        >>> data.transfer_fee("BTC", 10)
        0.001
        >>> data.transfer_fee("DOGE", 10) is None
        True
    """

    transfer_fees: Dict[str, TransferFee] = Field(default_factory=dict)
    confirmation_times: Dict[str, int] = Field(default_factory=dict)
    names: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("transfer_fees", mode="before")
    @classmethod
    def parse_transfer_fees(cls, v):
        """Accept raw venue values such as 0.001, "0.001" or "2%" """
        return {symbol: TransferFee.parse(raw) for symbol, raw in (v or {}).items()}

    def transfer_fee_entry(self, symbol: str) -> Optional[TransferFee]:
        return self.transfer_fees.get(symbol)

    def transfer_fee(self, symbol: str, amount: float) -> Optional[float]:
        """
        Fee for transferring `amount` of `symbol`, or None when unknown.

        Fixed fees ignore `amount`; percentage fees scale with it.
        """
        entry = self.transfer_fees.get(symbol)
        if entry is None:
            return None
        return entry.fee_for(amount)

    def confirmation_time(self, symbol: str) -> Optional[int]:
        return self.confirmation_times.get(symbol)

    def coin_name(self, symbol: str) -> Optional[str]:
        return self.names.get(symbol)
