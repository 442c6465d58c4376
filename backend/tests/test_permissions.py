# tests/test_permissions.py
from __future__ import annotations

import pytest

from app.auth.permissions import can_access_site, can_create_sites, is_superadmin


@pytest.mark.parametrize(
    "role,is_member,expected",
    [
        ("SUPERADMIN", True, True),
        ("SUPERADMIN", False, True),
        ("ADMIN", True, True),
        ("ADMIN", False, False),
        ("USER", True, True),
        ("USER", False, False),
        ("SOMETHING_ELSE", True, True),
        ("SOMETHING_ELSE", False, False),
        (None, False, False),
    ],
)
def test_can_access_site_truth_table(role, is_member, expected):
    assert can_access_site(role=role, is_member=is_member) is expected


@pytest.mark.parametrize(
    "role,expected",
    [("SUPERADMIN", True), ("ADMIN", True), ("USER", False), ("", False), (None, False)],
)
def test_can_create_sites(role, expected):
    assert can_create_sites(role) is expected


def test_is_superadmin_ignores_case_and_whitespace():
    assert is_superadmin(" superadmin ")
    assert not is_superadmin("ADMIN")
    assert not is_superadmin(None)
