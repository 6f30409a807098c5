from zoneinfo import ZoneInfo

from fleetdesk.settings import settings

LOCAL_TZ = ZoneInfo(settings.timezone)

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

PAYMENT_TYPE_LABELS = {
    "vehicle-acquisition": "Vehicle Acquisition",
    "driver-rental": "Driver Rental",
}

UNASSIGNED_PAYER = "Unassigned"


def format_month(month_number: int) -> str:
    if not 1 <= month_number <= 12:
        return str(month_number)
    return MONTH_NAMES[month_number - 1]
