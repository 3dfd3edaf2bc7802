import re
import logging
from typing import List, Tuple

from menu_packager.models.menu_models import MenuItem, NOT_AVAILABLE, UNKNOWN_ITEM

logger = logging.getLogger(__name__)

# " - " style separators win over hyphens inside names ("Stir-fry - £9")
SPACED_SEPARATOR_RE = re.compile(r"\s+[-–—]\s+")
SEPARATOR_RE = re.compile(r"[-–—]")


def split_menu_line(line: str) -> Tuple[str, str]:
    """
    Split one "name - price" line.

    Returns (name, price). Lines without a separator keep the whole line as
    the name and get the "N/A" price.
    """
    m = SPACED_SEPARATOR_RE.search(line) or SEPARATOR_RE.search(line)
    if not m:
        return line.strip(), NOT_AVAILABLE

    name = line[: m.start()].strip()
    price = line[m.end():].strip()
    return name, price or NOT_AVAILABLE


def parse_menu_text(text: str) -> List[MenuItem]:
    items = []

    for line in (text or "").splitlines():
        if not line.strip():
            continue

        name, price = split_menu_line(line)
        items.append(MenuItem(name=name or UNKNOWN_ITEM, price=price))

    logger.debug(f"Parsed {len(items)} menu items from text")
    return items
