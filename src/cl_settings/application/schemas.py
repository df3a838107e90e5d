from pydantic import BaseModel

from src.cl_common.cents import bps_to_display


class UpdateTaxRateRequest(BaseModel):
    # range is checked by the service so the error carries its own code
    tax_rate_bps: int


class TaxRateOut(BaseModel):
    tax_rate_bps: int
    tax_rate_display: str

    @classmethod
    def from_bps(cls, bps: int) -> "TaxRateOut":
        return cls(tax_rate_bps=bps, tax_rate_display=bps_to_display(bps))
