from django.conf import settings


DEFAULTS = {
    'RECENT_TRANSACTIONS_DEFAULT': 5,
    'USAGE_TREND_DEFAULT_DAYS': 30,
    'USAGE_TREND_MAX_DAYS': 365,
    'USAGE_TREND_ZERO_FILL': True,
    'REPORT_DEFAULT_DAYS': 30,
}


def get_setting(name):
    """Read an INVENTORY_CONFIG value, falling back to the built-in default"""
    return getattr(settings, 'INVENTORY_CONFIG', {}).get(name, DEFAULTS[name])
