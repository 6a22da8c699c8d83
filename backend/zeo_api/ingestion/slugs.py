from slugify import slugify as _slugify

# Lowercase ASCII letters, digits and dashes survive; any other run becomes one dash
SLUG_DISALLOWED = r"[^a-z0-9-]+"


def slugify(text: str) -> str:
    """'Annapurna Base Camp Trek!' -> 'annapurna-base-camp-trek'; accents are transliterated."""
    return _slugify(text or "", regex_pattern=SLUG_DISALLOWED)
