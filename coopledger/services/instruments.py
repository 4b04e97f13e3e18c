import enum
from typing import Optional


class Instrument(str, enum.Enum):
    """Payment channel a transaction moved through."""
    CASH = "cash"
    BANK = "bank"
    UPI = "upi"


# Checked in this order; the first instrument with a matching keyword wins.
INSTRUMENT_KEYWORDS = (
    (Instrument.CASH, ("cash",)),
    (Instrument.BANK, ("bank", "cheque", "neft", "rtgs", "imps")),
    (Instrument.UPI, ("upi", "online", "gpay", "phonepe", "paytm")),
)


def classify_instrument(mode: Optional[str], default: Instrument = Instrument.CASH) -> Instrument:
    """Classify a free-text payment mode by substring match.

    Unrecognized or empty modes fall back to ``default``: cash for member
    receipts and expenses, bank for loan disbursements.
    """
    if not mode:
        return default
    text = mode.lower()
    for instrument, keywords in INSTRUMENT_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return instrument
    return default


def loan_instrument(mode: Optional[str]) -> Instrument:
    return classify_instrument(mode, default=Instrument.BANK)
