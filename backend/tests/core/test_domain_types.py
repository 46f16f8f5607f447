"""Domain Types — verifies rich type definitions and enum values.

Tests:
    - NewType wrappers exist and are callable
    - Enums have expected members and serialize to string
    - DenialReason values double as error codes
"""

import dataclasses
from uuid import uuid4

import pytest

from devconnect.core.domain_types import (
    Action, DenialReason, Email, Identity, PaymentStatus,
    PostId, ResourceKind, Role, VoteType,
)


def test_identity_types_wrap_values():
    uid = uuid4()
    assert PostId(uid) == uid
    assert Email("a@x.com") == "a@x.com"


def test_identity_is_frozen():
    identity = Identity(email="a@x.com")
    assert identity.name is None
    with pytest.raises(dataclasses.FrozenInstanceError):
        identity.email = "b@x.com"


def test_role_and_payment_values_match_storage():
    assert [r.value for r in Role] == ["user", "admin"]
    assert {s.value for s in PaymentStatus} == {"unpaid", "paid"}


def test_vote_types_are_wire_values():
    assert {v.value for v in VoteType} == {"upvote", "downvote"}


def test_denial_reasons_are_error_codes():
    for reason in DenialReason:
        assert reason.value == reason.name


def test_actions_cover_gated_mutations():
    assert set(Action) == {
        Action.DELETE_OWN_RESOURCE, Action.MODERATE_RESOURCE,
        Action.ADMIN_ONLY, Action.SET_ROLE,
    }


def test_resource_kinds_serialize_to_string():
    assert ResourceKind.COMMENT.value == "comment"
    assert ResourceKind("post") is ResourceKind.POST
