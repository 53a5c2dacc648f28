"""Text sanitization utilities."""

import re


def sanitize_text(text: str | None, max_length: int = 200) -> str | None:
    """
    Sanitize untrusted text fields.

    Removes control characters and truncates to max_length.
    Apply to: company names from quotes or local file names.

    Args:
        text: Text to sanitize (may be None)
        max_length: Maximum length before truncation

    Returns:
        Sanitized text or None if input was None or blank
    """
    if text is None:
        return None

    # Remove control characters (including \r, \x00-\x1f, \x7f-\x9f)
    text = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", text)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text.strip() or None


def company_name_from_stem(stem: str, ticker: str) -> str | None:
    """
    Recover a company name from a '{TICKER}_{Name}' file stem.

    Underscores in the name part become spaces.
    """
    prefix = f"{ticker}_"
    if not stem.upper().startswith(prefix.upper()):
        return None
    return sanitize_text(stem[len(prefix):].replace("_", " "))
