# services/promotion-service/src/apps/core/seeds.py
"""
Default global promotion ladder.

Loaded by `manage.py seed_promotion_templates`. Bump a level's `version`
to have the seed command overwrite an existing copy of it.
"""

DEFAULT_LEVEL_TEMPLATES = [
    {
        'level_number': 1,
        'version': 1,
        'title': 'Level 1 - First step',
        'description': 'Attend an event and upload a photo of the venue.',
        'missions': [
            {
                'type': 'attend_event',
                'title': 'Attend 1 event',
                'description': 'Check in at one of the club\'s events.',
                'target': 1,
                'requires_approval': False,
                'order': 1,
            },
            {
                'type': 'upload_event_photo',
                'title': 'Upload 1 event photo',
                'description': 'Upload a photo of the venue or the event.',
                'target': 1,
                'params': {'per_event': True},
                'requires_approval': False,
                'order': 2,
            },
        ],
        'reward': {'type': 'shot', 'title': '1 shot', 'value': 1},
    },
    {
        'level_number': 2,
        'version': 1,
        'title': 'Level 2 - Social starter',
        'description': 'Complete social actions and prove your attendance with photos.',
        'missions': [
            {
                'type': 'follow_users',
                'title': 'Follow 5 users',
                'description': 'Follow 5 accounts on the platform.',
                'target': 5,
                'requires_approval': False,
                'order': 1,
            },
            {
                'type': 'attend_event',
                'title': 'Attend 2 events',
                'description': 'Attend 2 events.',
                'target': 2,
                'requires_approval': False,
                'order': 2,
            },
            {
                'type': 'upload_event_photo',
                'title': 'Upload a photo at each event',
                'description': 'Upload one photo at every event you attend.',
                'target': 2,
                'params': {'per_event': True},
                'requires_approval': False,
                'order': 3,
            },
            {
                'type': 'group_photo_with_followed',
                'title': 'Group photo with the users you follow',
                'description': 'Upload a group photo with the 5 users you followed.',
                'target': 1,
                'requires_approval': True,
                'order': 4,
            },
        ],
        'reward': {'type': 'free_entry', 'title': 'Free entry (1 person)', 'value': 1},
    },
    {
        'level_number': 3,
        'version': 1,
        'title': 'Level 3 - QR hunt',
        'description': 'Find the QR code inside the club and take part in the stamps game.',
        'missions': [
            {
                'type': 'scan_qr',
                'title': 'Find and scan the venue QR',
                'description': 'Scan the QR code hidden inside the club.',
                'target': 1,
                'requires_approval': False,
                'order': 1,
            },
            {
                'type': 'stamps_competition',
                'title': 'Collect stamps and upload a photo',
                'description': 'Upload a photo showing the stamp on your face. '
                               'Whoever collects the most stamps at the event levels up.',
                'target': 1,
                'requires_approval': True,
                'order': 2,
            },
        ],
        'reward': {
            'type': 'custom',
            'title': 'Level up + club prize',
            'description': 'The club decides the exact prize.',
        },
    },
    {
        'level_number': 4,
        'version': 1,
        'title': 'Level 4 - Theme night',
        'description': 'Join a themed event and upload the photo.',
        'missions': [
            {
                'type': 'theme_photo',
                'title': 'Themed photo with 1 person',
                'description': 'Upload a photo in theme costume with a friend or partner.',
                'target': 1,
                'requires_approval': True,
                'order': 1,
            },
        ],
        'reward': {'type': 'shot', 'title': '2 shots (1 each)', 'value': 2},
    },
    {
        'level_number': 5,
        'version': 1,
        'title': 'Level 5 - Photocall',
        'description': 'Photo at the photocall in couple mode (friends count too).',
        'missions': [
            {
                'type': 'photocall_photo',
                'title': 'Photocall photo',
                'description': 'Upload a photo at the photocall with 1 person.',
                'target': 1,
                'requires_approval': True,
                'order': 1,
            },
        ],
        'reward': {'type': 'free_entry', 'title': 'Free entry for 2', 'value': 2},
    },
    {
        'level_number': 6,
        'version': 1,
        'title': 'Level 6 - Collector',
        'description': 'Show off the prizes you have won.',
        'missions': [
            {
                'type': 'show_prizes_photo',
                'title': 'Photo with your prizes',
                'description': 'Upload a photo showing prizes or proof won at events.',
                'target': 1,
                'requires_approval': True,
                'order': 1,
            },
        ],
        'reward': {
            'type': 'custom',
            'title': 'Club prize',
            'description': 'Drink, upgrade or gift, depending on the club.',
        },
    },
    {
        'level_number': 7,
        'version': 1,
        'title': 'Level 7 - Team outfit',
        'description': 'Themed event in outfit or costume, with a photo with 1 person.',
        'missions': [
            {
                'type': 'theme_photo',
                'title': 'Themed photo with 1 person',
                'description': 'Attend a themed event and upload a photo with a friend or partner.',
                'target': 1,
                'requires_approval': True,
                'order': 1,
            },
        ],
        'reward': {'type': 'drink', 'title': '1 free drink', 'value': 1},
    },
    {
        'level_number': 8,
        'version': 1,
        'title': 'Level 8 - Veteran',
        'description': 'Consistency across the platform.',
        'missions': [
            {
                'type': 'attend_event',
                'title': 'Attend 20 events',
                'description': 'Reach 20 attended events on the platform.',
                'target': 20,
                'params': {'platform_wide': True},
                'requires_approval': False,
                'order': 1,
            },
        ],
        'reward': {'type': 'vip_access', 'title': 'VIP access for 4', 'value': 4, 'meta': {'people': 4}},
    },
    {
        'level_number': 9,
        'version': 1,
        'title': 'Level 9 - Legend',
        'description': 'High activity on the platform.',
        'missions': [
            {
                'type': 'attend_event',
                'title': 'Attend 40 events',
                'description': 'Reach 40 attended events on the platform.',
                'target': 40,
                'params': {'platform_wide': True},
                'requires_approval': False,
                'order': 1,
            },
        ],
        'reward': {'type': 'bottle', 'title': '1 bottle of your choice in VIP', 'value': 1},
    },
    {
        'level_number': 10,
        'version': 1,
        'title': 'Level 10 - Top tier',
        'description': 'The top level: total consistency.',
        'missions': [
            {
                'type': 'attend_event',
                'title': 'Attend 50 events',
                'description': 'Reach 50 attended events on the platform.',
                'target': 50,
                'params': {'platform_wide': True},
                'requires_approval': False,
                'order': 1,
            },
        ],
        'reward': {
            'type': 'trip',
            'title': 'Trip to New York (1 week)',
            'value': 1,
            'meta': {'destination': 'New York', 'duration_days': 7},
        },
    },
]
