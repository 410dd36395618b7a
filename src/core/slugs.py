import re

_DISALLOWED = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_slug(title: str) -> str:
    """Turn a title into a URL-safe slug.

    >>> generate_slug("Hello,  World -- again!")
    'hello-world-again'
    """
    slug = _DISALLOWED.sub("", title.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def make_slug(title: str, *, unique_suffix: int | None = None) -> str:
    """Slug for a new or retitled post, optionally suffixed to avoid collisions."""
    slug = generate_slug(title)
    if unique_suffix is None:
        return slug
    return f"{slug}-{unique_suffix}" if slug else str(unique_suffix)
