"""
Development settings for Promotion Service.
"""
from .base import *

DEBUG = True

ALLOWED_HOSTS = ['*']

# Enable browsable API in development
REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] = [
    'rest_framework.renderers.JSONRenderer',
    'rest_framework.renderers.BrowsableAPIRenderer',
]
