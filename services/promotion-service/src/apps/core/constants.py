# services/promotion-service/src/apps/core/constants.py
"""
Promotion Constants

Choice sets shared by templates, progress documents and claims, plus the
policy switches of the progress engine.
"""

from django.db import models


class MissionType(models.TextChoices):
    ATTEND_EVENT = 'attend_event', 'Attend Event'
    UPLOAD_EVENT_PHOTO = 'upload_event_photo', 'Upload Event Photo'
    FOLLOW_USERS = 'follow_users', 'Follow Users'
    GROUP_PHOTO_WITH_FOLLOWED = 'group_photo_with_followed', 'Group Photo With Followed Users'
    SCAN_QR = 'scan_qr', 'Scan Venue QR'
    THEME_PHOTO = 'theme_photo', 'Theme Photo'
    PHOTOCALL_PHOTO = 'photocall_photo', 'Photocall Photo'
    SHOW_PRIZES_PHOTO = 'show_prizes_photo', 'Show Prizes Photo'
    STAMPS_COMPETITION = 'stamps_competition', 'Stamps Competition'


class RewardType(models.TextChoices):
    SHOT = 'shot', 'Shot'
    DRINK = 'drink', 'Drink'
    FREE_ENTRY = 'free_entry', 'Free Entry'
    VIP_ACCESS = 'vip_access', 'VIP Access'
    BOTTLE = 'bottle', 'Bottle'
    TRIP = 'trip', 'Trip'
    CUSTOM = 'custom', 'Custom'


class MissionStatus(models.TextChoices):
    LOCKED = 'locked', 'Locked'
    IN_PROGRESS = 'in_progress', 'In Progress'
    PENDING = 'pending', 'Pending Review'
    APPROVED = 'approved', 'Approved'
    COMPLETED = 'completed', 'Completed'
    REJECTED = 'rejected', 'Rejected'


class LevelStatus(models.TextChoices):
    LOCKED = 'locked', 'Locked'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'


class EvidenceType(models.TextChoices):
    PHOTO = 'photo', 'Photo'
    QR_SCAN = 'qr_scan', 'QR Scan'
    TEXT = 'text', 'Text'
    MIXED = 'mixed', 'Mixed'


class ActivityKind(models.TextChoices):
    ATTENDANCE = 'attendance', 'Attendance'
    PHOTO_UPLOAD = 'photo_upload', 'Photo Upload'
    QR_SCAN = 'qr_scan', 'QR Scan'
    FOLLOW = 'follow', 'Follow'
    STAMP = 'stamp', 'Stamp'


MIN_LEVEL_NUMBER = 1
MAX_LEVEL_NUMBER = 100

# Level average policy for missions whose claim was rejected.
# True: the mission keeps counting at its last current/target ratio.
# False: rejected missions are left out of the level average.
REJECTED_MISSIONS_COUNT_IN_LEVEL_AVERAGE = True


class OverrideMode:
    """How club-scoped templates combine with the global ladder."""
    REPLACE_ALL = 'replace_all'
    MERGE_BY_LEVEL = 'merge_by_level'

    ALL = (REPLACE_ALL, MERGE_BY_LEVEL)


# Activity kind -> (club counter, platform counter, mission type it advances)
ACTIVITY_RULES = {
    ActivityKind.ATTENDANCE: ('attendances_in_club', 'attendances_platform', MissionType.ATTEND_EVENT),
    ActivityKind.PHOTO_UPLOAD: ('photos_uploaded_in_club', None, MissionType.UPLOAD_EVENT_PHOTO),
    ActivityKind.QR_SCAN: ('qr_scans_in_club', None, MissionType.SCAN_QR),
    ActivityKind.FOLLOW: (None, 'followed_users', MissionType.FOLLOW_USERS),
    ActivityKind.STAMP: ('stamps_in_current_event', None, None),
}

# Mission param: read the platform-wide counter instead of accumulating per club
PLATFORM_WIDE_PARAM = 'platform_wide'
