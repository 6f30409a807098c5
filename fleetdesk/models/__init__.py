from fleetdesk.settings import settings


def format_sar(halalas: int) -> str:
    """Format an amount stored in halalas as a display string, e.g. ``SAR 1,250.50``."""
    negative = halalas < 0
    whole, cents = divmod(abs(halalas), 100)
    text = f"{settings.currency} {whole:,}.{cents:02d}"
    return f"-{text}" if negative else text
