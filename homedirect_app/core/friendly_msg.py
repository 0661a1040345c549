FRIENDLY_MESSAGES = {
    "CircuitOpenError": "A required service is temporarily unavailable. Please try again shortly.",
    "StripeError": "The payment provider could not process the request. Please try again.",
    "ConnectionError": "Unable to connect to a required service. Please try again later.",
    "TimeoutError": "The request took too long. Please try again later.",
    "DatabaseError": "Temporary issue while accessing data. Please try again shortly.",
    "IntegrityError": "The request conflicts with existing data.",
}


def get_friendly_message(error: Exception) -> str:
    names = {cls.__name__.lower() for cls in type(error).__mro__}
    for key, msg in FRIENDLY_MESSAGES.items():
        if key.lower() in names:
            return msg
    return "Something went wrong on our end. Please try again."
