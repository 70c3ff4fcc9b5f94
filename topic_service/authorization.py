"""
Ownership decision for mutating a topic or an answer.

Pure function of the acting author's id/profile and the stored owner's
id/profile; the service layer turns a denial into the matching exception.
"""
import enum

from topic_service.models import ProfileName

PRIVILEGED_PROFILES = frozenset({ProfileName.MOD, ProfileName.ADM})


class Decision(enum.Enum):
    ALLOWED = "allowed"
    DENIED_NOT_OWNER = "denied_not_owner"
    DENIED_ORPHAN_AUTHOR = "denied_orphan_author"


def decide_mutation(
    acting_author_id: int,
    acting_profile: ProfileName | None,
    owner_id: int | None,
    owner_profile: ProfileName | None,
    *,
    editing: bool,
) -> Decision:
    """
    Rules, first match wins:
      1. editing a resource whose owner has no known profile -> DENIED_ORPHAN_AUTHOR
      2. acting profile MOD or ADM -> ALLOWED
      3. acting id equal to owner id -> ALLOWED, else DENIED_NOT_OWNER
    """
    if editing and (owner_id is None or owner_profile is None):
        return Decision.DENIED_ORPHAN_AUTHOR
    if acting_profile in PRIVILEGED_PROFILES:
        return Decision.ALLOWED
    if owner_id is not None and acting_author_id == owner_id:
        return Decision.ALLOWED
    return Decision.DENIED_NOT_OWNER
