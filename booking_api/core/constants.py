# booking_api/core/constants.py
APP_NAME = "Booking API"
API_VERSION = "1.0.0"
APP_DESCRIPTION = (
    "Providers publish time slots for their services; customers book, "
    "cancel and reschedule them."
)
