# services/promotion-service/src/apps/core/services/progress_engine.py
"""
Progress Engine

Pure functions over a progress document. No database access: callers load
the UserClubPromotionProgress row (locked), call these functions, and save.

A "progress" is anything exposing `levels`, `current_level`,
`current_progress` and `current_reward_title` attributes, normally a
UserClubPromotionProgress instance. Levels and missions are plain dicts.

The cached snapshot (`current_progress`, `current_reward_title` and each
level's `progress`) is never invalidated automatically: every code path that
changes a mission counter, a mission status or the current level must call
`refresh_current_snapshot` before saving.
"""

from typing import Any, Dict, Iterable, List, Optional

from django.utils import timezone

from .. import constants
from ..constants import LevelStatus, MissionStatus, RewardType

Level = Dict[str, Any]
Mission = Dict[str, Any]


def _now_iso() -> str:
    return timezone.now().isoformat()


def _field(obj, name: str, default=None):
    """Read a template attribute from a model instance or a mapping."""
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


# =============================================================================
# Keys and Lookups
# =============================================================================

def mission_key(level_number: int, mission_type: str, order: int) -> str:
    """Stable mission id within a ladder, e.g. L3_scan_qr_1."""
    return f"L{int(level_number)}_{mission_type}_{int(order or 0)}"


def find_level(progress, level_number) -> Optional[Level]:
    try:
        wanted = int(level_number)
    except (TypeError, ValueError):
        return None
    for level in progress.levels or []:
        if int(level.get('level_number', 0)) == wanted:
            return level
    return None


def find_mission(level: Optional[Level], key: str) -> Optional[Mission]:
    if not level:
        return None
    for mission in level.get('missions') or []:
        if mission.get('mission_key') == key:
            return mission
    return None


# =============================================================================
# Ratios
# =============================================================================

def compute_mission_ratio(mission: Mission) -> float:
    """current / target clamped to [0, 1]; 0 for a non-positive target."""
    target = mission.get('target')
    target = 1 if target is None else float(target)
    if target <= 0:
        return 0.0
    current = float(mission.get('current') or 0)
    return max(0.0, min(1.0, current / target))


def compute_level_progress(level: Level) -> float:
    """Unweighted mean of the level's mission ratios, 0 for no missions."""
    missions = level.get('missions') or []
    if not constants.REJECTED_MISSIONS_COUNT_IN_LEVEL_AVERAGE:
        missions = [m for m in missions if m.get('status') != MissionStatus.REJECTED]
    if not missions:
        return 0.0

    average = sum(compute_mission_ratio(m) for m in missions) / len(missions)
    return max(0.0, min(1.0, average))


# =============================================================================
# Materialization
# =============================================================================

def build_mission(level_number: int, template_mission: Dict[str, Any], unlocked: bool) -> Mission:
    now = _now_iso()
    order = template_mission.get('order') or 0
    target = template_mission.get('target')
    return {
        'mission_key': mission_key(level_number, template_mission['type'], order),
        'type': template_mission['type'],
        'title': template_mission.get('title') or '',
        'status': MissionStatus.IN_PROGRESS.value if unlocked else MissionStatus.LOCKED.value,
        'current': 0,
        'target': 1 if target is None else target,
        'requires_approval': bool(template_mission.get('requires_approval')),
        'claim_id': None,
        'params': dict(template_mission.get('params') or {}),
        'meta': {},
        'started_at': now if unlocked else None,
        'completed_at': None,
        'updated_at': now,
    }


def build_from_templates(templates: Iterable, start_level: int = 1) -> Dict[str, Any]:
    """
    Materialize a fresh progress document from level templates.

    Returns field values for UserClubPromotionProgress: the start level and
    its missions are in progress, every other level is locked.
    """
    ordered = sorted(templates or [], key=lambda t: int(_field(t, 'level_number')))
    levels: List[Level] = []

    for template in ordered:
        number = int(_field(template, 'level_number'))
        unlocked = number == start_level

        raw_missions = [m for m in (_field(template, 'missions') or []) if m.get('active', True)]
        raw_missions.sort(key=lambda m: m.get('order') or 0)

        reward = dict(_field(template, 'reward') or {})
        reward.setdefault('type', RewardType.CUSTOM.value)
        reward.setdefault('title', '')

        levels.append({
            'level_number': number,
            'title': _field(template, 'title') or f"Level {number}",
            'description': _field(template, 'description') or '',
            'status': LevelStatus.IN_PROGRESS.value if unlocked else LevelStatus.LOCKED.value,
            'missions': [build_mission(number, m, unlocked) for m in raw_missions],
            'reward': reward,
            'progress': 0.0,
            'completed_at': None,
        })

    start = next((lvl for lvl in levels if lvl['level_number'] == start_level), None)

    return {
        'current_level': start_level,
        'levels': levels,
        'current_progress': 0.0,
        'current_reward_title': (start or {}).get('reward', {}).get('title', '') if start else '',
        'pending_claims_count': 0,
        'attendances_in_club': 0,
        'photos_uploaded_in_club': 0,
        'qr_scans_in_club': 0,
        'attendances_platform': 0,
        'followed_users': 0,
        'stamps_in_current_event': 0,
        'last_activity_at': timezone.now(),
    }


# =============================================================================
# Transitions
# =============================================================================

def unlock_next_level(progress, completed_level_number: int) -> None:
    """
    Open the level after `completed_level_number` and point the snapshot at it.

    No-op when there is no next level. The current level pointer only ever
    moves forward.
    """
    next_number = int(completed_level_number) + 1
    next_level = find_level(progress, next_number)
    if next_level is None:
        return

    if next_level.get('status') == LevelStatus.LOCKED:
        now = _now_iso()
        next_level['status'] = LevelStatus.IN_PROGRESS.value
        for mission in next_level.get('missions') or []:
            if mission.get('status') == MissionStatus.LOCKED:
                mission['status'] = MissionStatus.IN_PROGRESS.value
            if not mission.get('started_at'):
                mission['started_at'] = now
            mission['updated_at'] = now

    if next_number >= int(progress.current_level or 0):
        progress.current_level = next_number
        progress.current_reward_title = (next_level.get('reward') or {}).get('title', '')


def refresh_current_snapshot(progress) -> None:
    """Recompute the cached progress of the current level."""
    level = find_level(progress, progress.current_level)
    if level is None:
        progress.current_progress = 0.0
        return

    level['progress'] = compute_level_progress(level)
    progress.current_progress = level['progress']
    progress.current_reward_title = (level.get('reward') or {}).get('title', '')


def complete_mission(mission: Mission) -> None:
    now = _now_iso()
    mission['status'] = MissionStatus.COMPLETED.value
    mission['current'] = max(mission.get('current') or 0, mission.get('target') or 1)
    mission['completed_at'] = mission.get('completed_at') or now
    mission['updated_at'] = now


def apply_level_completion(progress, level: Level) -> bool:
    """
    Complete `level` if all its missions are satisfied and unlock the next one.

    Returns True only when the level transitioned to completed on this call.
    """
    level['progress'] = compute_level_progress(level)
    if level['progress'] < 1.0 or level.get('status') == LevelStatus.COMPLETED:
        return False
    if not level.get('missions'):
        return False

    level['status'] = LevelStatus.COMPLETED.value
    level['completed_at'] = _now_iso()
    unlock_next_level(progress, level['level_number'])
    return True


def is_level_unlocked(level: Optional[Level]) -> bool:
    return bool(level) and level.get('status') != LevelStatus.LOCKED
