"""Tests for identity resolution and role changes."""

import pytest

from site_bot.models.user import UserRole
from site_bot.services.user_service import UserService


@pytest.fixture
def users(session_factory):
    return UserService(session_factory)


@pytest.mark.asyncio
async def test_first_contact_creates_verified_customer(users):
    user = await users.get_or_create("98765 43210")
    assert user.phone == "+919876543210"
    assert user.role is UserRole.CUSTOMER
    assert user.is_verified


@pytest.mark.asyncio
async def test_get_or_create_is_idempotent_across_formats(users):
    first = await users.get_or_create("9876543210")
    second = await users.get_or_create("+91 98765 43210")
    assert first.id == second.id


@pytest.mark.asyncio
async def test_promotion_requires_reverification(users):
    await users.get_or_create("9876543210")
    employee = await users.promote_to_employee("9876543210", name="Ravi")
    assert employee.is_employee
    assert not employee.is_verified

    stored = await users.get_by_phone("+919876543210")
    assert stored.role is UserRole.EMPLOYEE
    assert stored.name == "Ravi"
    assert stored.verified_at is None


@pytest.mark.asyncio
async def test_mark_verified(users):
    await users.promote_to_employee("9876543210")
    await users.mark_verified("9876543210")
    assert (await users.get_by_phone("9876543210")).is_verified


@pytest.mark.asyncio
async def test_demotion_marks_verified(users):
    await users.promote_to_employee("9876543210")
    customer = await users.demote_to_customer("9876543210")
    assert customer.role is UserRole.CUSTOMER
    assert customer.is_verified


@pytest.mark.asyncio
async def test_demote_unknown_user(users):
    assert await users.demote_to_customer("9000000000") is None
