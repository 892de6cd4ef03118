"""
Display masking for phone numbers and email addresses.

Used for notification text and logs only, never for matching.
"""

MASK = '****'


def hash_phone(phone) -> str:
    """'1234567890' -> '12345****7890'. Shorter than 9 chars: unchanged."""
    text = str(phone)
    if len(text) < 9:
        return text
    return text[:5] + MASK + text[-4:]


def hash_email(email) -> str:
    """'abcdef@x.com' -> 'ab****@x.com'. Local part under 3 chars or no '@': unchanged."""
    text = str(email)
    at = text.find('@')
    if at < 3:
        return text
    return text[:2] + MASK + text[at:]
