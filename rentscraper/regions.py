"""
Locality lookup: maps typed area names to the site's region/section ids.

The id table lives in ``data/localities.json`` and can be swapped with the
RENT_LOCALITIES_FILE environment variable. The ids have changed on the site
before, so treat the table as data to re-check, not as ground truth.
"""
import json
import logging
import re
import unicodedata
from functools import lru_cache
from typing import Dict, List, NamedTuple, Optional

from .config import settings
from .models import Resolution, Target

logger = logging.getLogger(__name__)

# Tokens that mean "the whole default scope"
ALL_KEYWORDS = {"all", "全", "全部", "全區", "entire", "entirelocality", "entirecity"}

WHOLE_SUFFIX = "全區"


class LocalityTable(NamedTuple):
    localities: Dict[int, str]
    sub_localities: Dict[int, dict]
    locality_index: Dict[str, int]
    sub_locality_index: Dict[str, int]
    default_scope: List[int]
    default_targets: List[int]


def normalize_name(text: str) -> str:
    """
    Fold a typed area name for lookup.

    Case and diacritics are ignored, as are spaces, hyphens and apostrophes,
    and the traditional 臺 is folded onto 台.
    """
    if not text:
        return ""
    s = unicodedata.normalize("NFKD", text)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = s.casefold().replace("臺", "台")
    return re.sub(r"[\s\-_'’`.]+", "", s)


def _short_form(name: str) -> str:
    return name[:-1] if name.endswith("區") else name


def load_locality_table(path: Optional[str] = None) -> LocalityTable:
    """Read the locality table from JSON and build the lookup indexes."""
    path = path or settings.LOCALITIES_FILE
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    localities: Dict[int, str] = {}
    locality_index: Dict[str, int] = {}
    for loc in raw.get("localities", []):
        loc_id = int(loc["id"])
        localities[loc_id] = loc["name"]
        for alias in [loc["name"], *loc.get("aliases", [])]:
            locality_index.setdefault(normalize_name(alias), loc_id)

    sub_localities: Dict[int, dict] = {}
    sub_locality_index: Dict[str, int] = {}
    for sec in raw.get("sub_localities", []):
        sec_id = int(sec["id"])
        if int(sec["locality"]) not in localities:
            logger.warning(f"Sub-locality {sec['name']} points at unknown locality {sec['locality']}")
            continue
        sub_localities[sec_id] = {"locality": int(sec["locality"]), "name": sec["name"]}
        names = [sec["name"], _short_form(sec["name"])]
        romanized = sec.get("romanized")
        if romanized:
            names += [romanized, f"{romanized} district"]
        for alias in names:
            key = normalize_name(alias)
            if key in sub_locality_index and sub_locality_index[key] != sec_id:
                logger.debug(f"Ambiguous sub-locality alias {alias!r}, keeping first entry")
                continue
            sub_locality_index[key] = sec_id

    return LocalityTable(
        localities=localities,
        sub_localities=sub_localities,
        locality_index=locality_index,
        sub_locality_index=sub_locality_index,
        default_scope=[int(x) for x in raw.get("default_scope", [])],
        default_targets=[int(x) for x in raw.get("default_targets", [])],
    )


@lru_cache(maxsize=None)
def get_locality_table() -> LocalityTable:
    return load_locality_table()


def whole_locality_target(locality_id: int, table: Optional[LocalityTable] = None) -> Target:
    table = table or get_locality_table()
    return Target(locality_id=locality_id, display_name=f"{table.localities[locality_id]}{WHOLE_SUFFIX}")


def sub_locality_target(sub_locality_id: int, table: Optional[LocalityTable] = None) -> Target:
    table = table or get_locality_table()
    sec = table.sub_localities[sub_locality_id]
    city = table.localities[sec["locality"]]
    return Target(
        locality_id=sec["locality"],
        sub_locality_id=sub_locality_id,
        display_name=f"{city}-{sec['name']}",
    )


def resolve_target(name: str, table: Optional[LocalityTable] = None) -> Optional[Target]:
    """
    Resolve one area name to a Target, or None when it is not in the table.

    District names are tried before city names; a city name yields a
    whole-locality target.
    """
    table = table or get_locality_table()
    key = normalize_name(name)
    if not key:
        return None

    sec_id = table.sub_locality_index.get(key)
    if sec_id is None and not key.endswith("區"):
        sec_id = table.sub_locality_index.get(key + "區")
    if sec_id is None and key.endswith("district"):
        sec_id = table.sub_locality_index.get(key[: -len("district")])
    if sec_id is not None:
        return sub_locality_target(sec_id, table)

    loc_id = table.locality_index.get(key)
    if loc_id is None and key.endswith(WHOLE_SUFFIX):
        loc_id = table.locality_index.get(key[: -len(WHOLE_SUFFIX)])
    if loc_id is not None:
        return whole_locality_target(loc_id, table)

    return None


def resolve_targets(text: str, table: Optional[LocalityTable] = None) -> Resolution:
    """
    Resolve a space-separated list of area names.

    Unknown names are collected in ``unknown`` and do not stop the others
    from resolving. Duplicate targets are kept once, in input order.
    """
    table = table or get_locality_table()
    result = Resolution()
    if normalize_name(text) in ALL_KEYWORDS:
        result.targets = [whole_locality_target(loc_id, table) for loc_id in table.default_scope]
        return result

    tokens = [t for t in re.split(r"[\s,、，]+", text or "") if t]

    for token in tokens:
        if normalize_name(token) in ALL_KEYWORDS:
            found = [whole_locality_target(loc_id, table) for loc_id in table.default_scope]
        else:
            target = resolve_target(token, table)
            if target is None:
                result.unknown.append(token)
                continue
            found = [target]
        for target in found:
            if target not in result.targets:
                result.targets.append(target)

    if result.unknown:
        logger.info(f"Unresolved area names: {', '.join(result.unknown)}")
    return result


def default_targets(table: Optional[LocalityTable] = None) -> List[Target]:
    """The stock watch list of districts."""
    table = table or get_locality_table()
    return [sub_locality_target(sec_id, table) for sec_id in table.default_targets]


def supported_localities(table: Optional[LocalityTable] = None) -> List[str]:
    table = table or get_locality_table()
    return list(table.localities.values())


def supported_sub_localities(table: Optional[LocalityTable] = None) -> List[str]:
    table = table or get_locality_table()
    return [sec["name"] for sec in table.sub_localities.values()]
