"""
Tests for the ownership decision used by topic and answer mutations.
"""
import pytest

from topic_service.authorization import Decision, decide_mutation
from topic_service.models import ProfileName


def test_owner_with_basic_profile_is_allowed():
    assert decide_mutation(1, ProfileName.BASIC, 1, ProfileName.BASIC, editing=True) is Decision.ALLOWED


def test_basic_non_owner_is_denied():
    assert decide_mutation(1, ProfileName.BASIC, 2, ProfileName.MOD, editing=True) is Decision.DENIED_NOT_OWNER
    assert decide_mutation(1, ProfileName.BASIC, 2, ProfileName.MOD, editing=False) is Decision.DENIED_NOT_OWNER


@pytest.mark.parametrize("profile", [ProfileName.MOD, ProfileName.ADM])
def test_moderator_and_admin_may_mutate_foreign_resources(profile):
    assert decide_mutation(9, profile, 1, ProfileName.BASIC, editing=True) is Decision.ALLOWED
    assert decide_mutation(9, profile, 1, ProfileName.BASIC, editing=False) is Decision.ALLOWED


@pytest.mark.parametrize("profile", [ProfileName.BASIC, ProfileName.MOD, ProfileName.ADM])
def test_editing_orphaned_resource_is_denied_before_role_check(profile):
    assert decide_mutation(3, profile, 4, None, editing=True) is Decision.DENIED_ORPHAN_AUTHOR
    assert decide_mutation(3, profile, None, None, editing=True) is Decision.DENIED_ORPHAN_AUTHOR


def test_deleting_orphaned_resource_follows_role_rules():
    assert decide_mutation(2, ProfileName.MOD, 4, None, editing=False) is Decision.ALLOWED
    assert decide_mutation(1, ProfileName.BASIC, 4, None, editing=False) is Decision.DENIED_NOT_OWNER
    assert decide_mutation(1, ProfileName.BASIC, None, None, editing=False) is Decision.DENIED_NOT_OWNER


def test_acting_author_without_profile_is_treated_as_basic():
    assert decide_mutation(5, None, 5, ProfileName.BASIC, editing=True) is Decision.ALLOWED
    assert decide_mutation(5, None, 6, ProfileName.BASIC, editing=True) is Decision.DENIED_NOT_OWNER
