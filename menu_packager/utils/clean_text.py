import re
import logging

logger = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*$")
BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")
PRICE_TOKEN_RE = re.compile(r"^[^\d\s]{0,3}(?:\d{1,3}(?:,\d{3})+|\d+)(?:[.,]\d{1,2})?[^\d\s]{0,3}$")
HAS_SEPARATOR_RE = re.compile(r"\s[-–—]\s")


def normalize_extracted_text(raw: str) -> str:
    """Tidy menu text returned by the AI into plain "name - price" lines."""
    if not raw:
        return ""

    lines = []
    for line in raw.splitlines():
        if CODE_FENCE_RE.match(line):
            continue
        s = BULLET_RE.sub("", line).strip()
        s = s.replace("**", "")
        if len(s) <= 1:
            continue
        if re.match(r'^[\W_]+$', s):
            continue
        s = re.sub(r'\.{2,}', ' ', s)
        s = re.sub(r'[ \t]{2,}', ' ', s)
        lines.append(s)

    return "\n".join(lines).strip()


def to_menu_lines(text: str) -> str:
    """
    Rewrite loosely formatted menu text as "name - price" lines.

    Handles a trailing price token ("Pizza 12.99") and column gaps
    ("Pizza    12.99"). Lines that already have a separator are kept; lines
    with neither a price nor a column gap are dropped.
    """
    out = []
    for line in (text or "").splitlines():
        s = line.strip()
        if not s:
            continue

        if HAS_SEPARATOR_RE.search(s):
            out.append(s)
            continue

        parts = s.split()
        if len(parts) > 1 and PRICE_TOKEN_RE.match(parts[-1]):
            out.append(f"{' '.join(parts[:-1])} - {parts[-1]}")
        elif re.search(r"\S\s{2,}\S", s):
            out.append(re.sub(r"\s{2,}", " - ", s))
        else:
            logger.debug(f"Dropping line without a price: {s!r}")

    return "\n".join(out)
