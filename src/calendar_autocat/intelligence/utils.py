from __future__ import annotations

import re
import unicodedata


_WS_RE = re.compile(r"\s+")
# Any unicode letter; digits and underscore split tokens.
_TOKEN_RE = re.compile(r"[^\W\d_]+")


def _nfc(t: str) -> str:
    # decomposed umlauts (u + U+0308) would otherwise split tokens at the mark
    return unicodedata.normalize("NFC", t)


def normalize_text(t: str | None) -> str:
    """NFC, lowercase, trim, squash whitespace."""
    return _WS_RE.sub(" ", _nfc(t or "").strip().lower())


def tokens(t: str) -> list[str]:
    """Letter-run tokenizer. Umlauts and sharp-s are letters."""
    return _TOKEN_RE.findall(_nfc(t).lower())


def has_phrase(text: str, phrase: str) -> bool:
    """True if `phrase` sits in `text` bounded by spaces or string edges."""
    return f" {phrase} " in f" {text} "
