"""HTML/XML character reference decoding with support for nested encodings."""
from __future__ import annotations

import re
from typing import Dict

HTML_ENTITY_MAP: Dict[str, str] = {
    # Latin letters with accents
    "agrave": "à", "aacute": "á", "acirc": "â", "atilde": "ã", "auml": "ä", "aring": "å",
    "Agrave": "À", "Aacute": "Á", "Acirc": "Â", "Atilde": "Ã", "Auml": "Ä", "Aring": "Å",
    "ccedil": "ç", "Ccedil": "Ç",
    "egrave": "è", "eacute": "é", "ecirc": "ê", "euml": "ë",
    "Egrave": "È", "Eacute": "É", "Ecirc": "Ê", "Euml": "Ë",
    "igrave": "ì", "iacute": "í", "icirc": "î", "iuml": "ï",
    "Igrave": "Ì", "Iacute": "Í", "Icirc": "Î", "Iuml": "Ï",
    "ograve": "ò", "oacute": "ó", "ocirc": "ô", "otilde": "õ", "ouml": "ö", "oslash": "ø",
    "Ograve": "Ò", "Oacute": "Ó", "Ocirc": "Ô", "Otilde": "Õ", "Ouml": "Ö", "Oslash": "Ø",
    "ugrave": "ù", "uacute": "ú", "ucirc": "û", "uuml": "ü",
    "Ugrave": "Ù", "Uacute": "Ú", "Ucirc": "Û", "Uuml": "Ü",
    "yacute": "ý", "yuml": "ÿ", "Yacute": "Ý",
    "ntilde": "ñ", "Ntilde": "Ñ",
    "aelig": "æ", "AElig": "Æ",
    "szlig": "ß",
    "thorn": "þ", "THORN": "Þ",
    "eth": "ð", "ETH": "Ð",
    # Quotation marks and apostrophes
    "lsquo": "‘", "rsquo": "’", "sbquo": "‚",
    "ldquo": "“", "rdquo": "”", "bdquo": "„",
    "quot": '"', "apos": "'",
    "lsaquo": "‹", "rsaquo": "›",
    "laquo": "«", "raquo": "»",
    # Punctuation
    "nbsp": "\u00a0", "iexcl": "¡", "iquest": "¿",
    "hellip": "…", "ndash": "–", "mdash": "—",
    "bull": "•", "middot": "·",
    "dagger": "†", "Dagger": "‡",
    "permil": "‰",
    "prime": "′", "Prime": "″",
    # Symbols
    "copy": "©", "reg": "®", "trade": "™",
    "euro": "€", "pound": "£", "yen": "¥", "cent": "¢",
    "curren": "¤", "fnof": "ƒ",
    "sect": "§", "para": "¶",
    "deg": "°", "plusmn": "±",
    "times": "×", "divide": "÷",
    "frac14": "¼", "frac12": "½", "frac34": "¾",
    "sup1": "¹", "sup2": "²", "sup3": "³",
    "micro": "µ",
    # XML special characters
    "amp": "&", "lt": "<", "gt": ">",
    # Math and Greek
    "alpha": "α", "beta": "β", "gamma": "γ", "delta": "δ", "epsilon": "ε",
    "Alpha": "Α", "Beta": "Β", "Gamma": "Γ", "Delta": "Δ", "Epsilon": "Ε",
    "infin": "∞", "sum": "∑", "minus": "−", "radic": "√",
    "ne": "≠", "equiv": "≡", "le": "≤", "ge": "≥",
}

_NAMED_RE = re.compile(r"&([a-zA-Z]+);")
_DECIMAL_RE = re.compile(r"&#(\d+);")
_HEX_RE = re.compile(r"&#[xX]([0-9A-Fa-f]+);")

_MAX_CODE_POINT = 0x10FFFF
_XML_CONTROL_CHARS = frozenset({0x9, 0xA, 0xD})

__all__ = ["HTML_ENTITY_MAP", "decode_entities"]


def _named(match: re.Match[str]) -> str:
    return HTML_ENTITY_MAP.get(match.group(1), match.group(0))


def _is_xml_char(code: int) -> bool:
    """XML 1.0 Char production: no NUL, C0 controls, surrogates, U+FFFE or U+FFFF."""

    if code < 0x20:
        return code in _XML_CONTROL_CHARS
    return (
        code <= 0xD7FF
        or 0xE000 <= code <= 0xFFFD
        or 0x10000 <= code <= _MAX_CODE_POINT
    )


def _code_point(match: re.Match[str], base: int) -> str:
    code = int(match.group(1), base)
    # References to characters XML cannot carry stay as written.
    if _is_xml_char(code):
        return chr(code)
    return match.group(0)


def _decimal(match: re.Match[str]) -> str:
    return _code_point(match, 10)


def _hexadecimal(match: re.Match[str]) -> str:
    return _code_point(match, 16)


def decode_entities(text: str | None, max_passes: int = 5) -> str | None:
    """Decode named and numeric character references in *text*.

    Each pass applies the named, decimal and hexadecimal rules in that order.
    The output of a pass is fed into the next one until nothing changes or
    *max_passes* is reached, so ``&amp;rsquo;`` becomes ``&rsquo;`` and then
    ``’``. Unknown entity names are left as they are, and so are numeric
    references to code points an XML document cannot hold (``&#0;``,
    ``&#1;``, ``&#xD800;``, ``&#xFFFF;``, anything past U+10FFFF).
    """

    if not text:
        return text

    result = text
    previous = None
    passes = 0
    while result != previous and passes < max_passes:
        previous = result
        result = _NAMED_RE.sub(_named, result)
        result = _DECIMAL_RE.sub(_decimal, result)
        result = _HEX_RE.sub(_hexadecimal, result)
        passes += 1
    return result
