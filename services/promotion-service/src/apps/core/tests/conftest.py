# services/promotion-service/src/apps/core/tests/conftest.py
"""
Pytest Configuration and Fixtures

Provides common fixtures for Promotion Service tests.
"""

import uuid

import pytest
from rest_framework.test import APIClient

from .factories import MockUser, make_template


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Return DRF API client."""
    return APIClient()


@pytest.fixture
def authenticated_client(api_client, test_user):
    """Return API client authenticated as a regular user."""
    api_client.force_authenticate(user=test_user)
    return api_client


@pytest.fixture
def manager_client(test_manager):
    """Return API client authenticated as staff of `club_id`."""
    client = APIClient()
    client.force_authenticate(user=test_manager)
    return client


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def club_id():
    return uuid.uuid4()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def test_user(user_id):
    """Create mock test user."""
    return MockUser(user_id=str(user_id))


@pytest.fixture
def test_manager(club_id):
    """Create mock staff user of `club_id`."""
    return MockUser(club_id=club_id)


@pytest.fixture
def admin_user():
    """Create mock admin user."""
    return MockUser(roles=['admin'])


# =============================================================================
# Template Fixtures
# =============================================================================

@pytest.fixture
def approval_ladder(db):
    """
    Global two-level ladder.

    Level 1: two approval missions (theme photo, photocall photo).
    Level 2: one attendance mission and one approval mission.
    """
    level_1 = make_template(1, [
        {'type': 'theme_photo', 'title': 'Theme photo', 'target': 1, 'requires_approval': True, 'order': 1},
        {'type': 'photocall_photo', 'title': 'Photocall', 'target': 1, 'requires_approval': True, 'order': 2},
    ], reward_title='1 shot', reward_type='shot')
    level_2 = make_template(2, [
        {'type': 'attend_event', 'title': 'Attend 2 events', 'target': 2, 'order': 1},
        {'type': 'show_prizes_photo', 'title': 'Prizes', 'target': 1, 'requires_approval': True, 'order': 2},
    ], reward_title='Free entry', reward_type='free_entry')
    return [level_1, level_2]


@pytest.fixture
def activity_ladder(db):
    """
    Global three-level ladder driven by activity.

    Level 1: attend 1 event, upload 1 photo.
    Level 2: follow 2 users, scan 1 QR.
    Level 3: attend 3 events platform wide.
    """
    return [
        make_template(1, [
            {'type': 'attend_event', 'title': 'Attend', 'target': 1, 'order': 1},
            {'type': 'upload_event_photo', 'title': 'Photo', 'target': 1, 'order': 2},
        ], reward_title='1 shot'),
        make_template(2, [
            {'type': 'follow_users', 'title': 'Follow', 'target': 2, 'order': 1},
            {'type': 'scan_qr', 'title': 'QR', 'target': 1, 'order': 2},
        ], reward_title='1 drink'),
        make_template(3, [
            {'type': 'attend_event', 'title': 'Attend 3', 'target': 3, 'params': {'platform_wide': True}, 'order': 1},
        ], reward_title='VIP'),
    ]
