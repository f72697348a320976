"""
Caching utilities for dashboard/report payloads.

Report payloads are cached per user. Instead of deleting keys by pattern, every
user has a version counter that is part of the key; bumping the counter makes
all previously cached payloads of that user unreachable.
"""
from django.conf import settings
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

REPORTS_VERSION_KEY_PREFIX = 'reports_version:'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def get_reports_version(user_id):
    return cache.get(f"{REPORTS_VERSION_KEY_PREFIX}{user_id}", 1)


def bump_reports_version(user_id):
    """Invalidate every cached report payload of a user"""
    if not user_id:
        return
    key = f"{REPORTS_VERSION_KEY_PREFIX}{user_id}"
    try:
        cache.incr(key)
    except ValueError:
        # Key missing (never cached or evicted)
        cache.set(key, 2, None)
    logger.debug(f"Bumped report cache version for user {user_id}")


def cached_report(key_prefix):
    """
    Decorator caching a report builder whose first argument is the user.

    Usage:
        @cached_report('dashboard')
        def build_dashboard(user, first_day, last_day):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(user, *args, **kwargs):
            version = get_reports_version(user.pk)
            cache_key = make_cache_key(key_prefix, user.pk, version, *args, **kwargs)
            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data
            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(user, *args, **kwargs)
            cache.set(cache_key, result, settings.REPORTS_CACHE_TTL)
            return result
        return wrapper
    return decorator
