from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Union

GST_PERCENTAGE = 5
GST_RATE = Decimal(GST_PERCENTAGE) / Decimal(100)

_CENT = Decimal("0.01")
# Working precision for price arithmetic, wide enough for any finite float
_PRECISION = 400

Number = Union[int, float, Decimal, str]


def round2(value: Number) -> Decimal:
    """Half-up rounding to two fractional digits"""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        # go through str so binary float noise (e.g. 2.675) does not leak in
        return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PriceBreakdown:
    gst_percentage: int
    gst_amount: float
    total_price: float

    def to_fields(self) -> dict:
        return {
            "gst_percentage": self.gst_percentage,
            "gst_amount": self.gst_amount,
            "total_price": self.total_price,
        }


def compute_price_breakdown(sell_price: Number, gst_enabled: bool) -> PriceBreakdown:
    """
    Derive the tax fields of a product

    gstAmount = round2(sellPrice * 0.05) when GST applies, else 0
    totalPrice = round2(sellPrice + gstAmount)
    """
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        price = Decimal(str(sell_price))
        gst_amount = round2(price * GST_RATE) if gst_enabled else Decimal(0)
        total_price = round2(price + gst_amount)
    return PriceBreakdown(
        gst_percentage=GST_PERCENTAGE if gst_enabled else 0,
        gst_amount=float(gst_amount),
        total_price=float(total_price),
    )
