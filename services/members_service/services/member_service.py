"""
Business logic for unified member identities.

Pure functions with no database dependencies for easy testing. The
unified-member migration, the verification report and the admin routers
all resolve legacy rows through these helpers so they agree on what
"the same person" means.
"""

from datetime import date
from typing import Hashable, Iterable, Optional

from libs.common.datetime_utils import is_minor

# Legacy athlete status -> unified member status
ATHLETE_STATUS_MAP = {
    "stand-bye": "legacy",
    "archived": "archived",
    "enrolled": "enrolled",
}

IdentityKey = tuple[Hashable, Hashable, Optional[date], Optional[int]]


def split_full_name(full_name: Optional[str], fallback: str = "") -> tuple[str, str]:
    """
    Split a display name on its first space.

    "Mary Ann Smith" -> ("Mary", "Ann Smith"); "Cher" -> ("Cher", "").
    A blank name yields (fallback, "").
    """
    name = (full_name or "").strip()
    if not name:
        return fallback, ""
    first, _, rest = name.partition(" ")
    return first, rest.strip()


def map_athlete_status(status: Optional[str], default: Optional[str] = "legacy") -> Optional[str]:
    """
    Map a legacy athlete status onto the unified member status.

    Unknown statuses map to ``default``; the merge step passes the
    member's current status so unknown values leave it unchanged.
    """
    return ATHLETE_STATUS_MAP.get(status or "", default)


def athlete_is_active(status: Optional[str]) -> bool:
    return status != "archived"


def member_is_active(is_active: Optional[bool], status: Optional[str]) -> bool:
    """A member counts as active when flagged active and not archived."""
    return bool(is_active) and status != "archived"


def _normalize_name(value: Optional[str], normalize: bool) -> Optional[str]:
    if value is None or not normalize:
        return value
    return value.strip().casefold()


def identity_key(
    first_name: Optional[str],
    last_name: Optional[str],
    date_of_birth: Optional[date],
    family_id: Optional[int],
    normalize: bool = False,
) -> IdentityKey:
    """
    Matching key for an athlete without a login.

    Exact tuple equality by default. Missing family ids and missing dates
    of birth compare equal to each other. With ``normalize`` names are
    trimmed and case folded first.
    """
    return (
        _normalize_name(first_name, normalize),
        _normalize_name(last_name, normalize),
        date_of_birth,
        family_id,
    )


def family_activity(members: Iterable[tuple[int, Optional[int], bool, str]]) -> dict[int, bool]:
    """
    Compute ``family_is_active`` for each member.

    ``members`` yields (member_id, family_id, is_active, status). Members of
    a family share one flag: true when any of them is active. Members with
    no family get their own activity.
    """
    rows = list(members)
    active_families = {
        family_id
        for _, family_id, active, status in rows
        if family_id is not None and member_is_active(active, status)
    }
    result = {}
    for member_id, family_id, active, status in rows:
        if family_id is None:
            result[member_id] = member_is_active(active, status)
        else:
            result[member_id] = family_id in active_families
    return result


def guardian_child_pairs(
    guardians: Iterable[tuple[int, int]],
    members: Iterable[tuple[int, Optional[int], Optional[date]]],
    today: Optional[date] = None,
) -> set[tuple[int, int]]:
    """
    Derive (guardian member, minor member) pairs within each family.

    ``guardians`` yields (family_id, guardian_member_id); ``members`` yields
    (member_id, family_id, date_of_birth). A guardian is never paired with
    themselves.
    """
    minors_by_family: dict[int, list[int]] = {}
    for member_id, family_id, date_of_birth in members:
        if family_id is not None and is_minor(date_of_birth, today):
            minors_by_family.setdefault(family_id, []).append(member_id)

    pairs = set()
    for family_id, guardian_id in guardians:
        for child_id in minors_by_family.get(family_id, []):
            if child_id != guardian_id:
                pairs.add((guardian_id, child_id))
    return pairs
