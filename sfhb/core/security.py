"""Writer token verification."""

from __future__ import annotations

import secrets


def token_matches(supplied: str | None, secret: str | None) -> bool:
    """Return True when the supplied token grants write access.

    An empty secret disables the check entirely.
    """
    expected = secret or ""
    if not expected:
        return True
    return secrets.compare_digest((supplied or "").encode("utf-8"), expected.encode("utf-8"))
