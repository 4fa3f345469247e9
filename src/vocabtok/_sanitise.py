"""
Utilities for rendering tokens as displayable strings.
"""

import unicodedata


def _escape_ctrl_chars(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    cleaned = []
    for c in s:
        # control category codes vary: Cc, Cf, Cn etc.
        # so check via first character
        if unicodedata.category(c)[0] != "C":
            cleaned.append(c)
        else:
            cleaned.append(f"\\u{ord(c):04x}")
    return "".join(cleaned)


def render_token(tok: str) -> str:
    """Escape control characters so a token prints on a single line."""
    return _escape_ctrl_chars(tok)


def render_tokens(toks: list[str]) -> str:
    """Render a token list as ``[tok0] [tok1] ...`` with control characters escaped."""
    return " ".join(f"[{render_token(tok)}]" for tok in toks)
