import time

import redis as redis_lib
from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component='common', layer='health')

COLLABORATOR_SETTINGS = {
    'product_service': 'PRODUCT_SERVICE_URL',
    'user_service': 'USER_SERVICE_URL',
}


def _redis_ping(url: str, timeout: float = 0.3):
    try:
        client = redis_lib.from_url(url, socket_connect_timeout=timeout, socket_timeout=timeout)
        pong = client.ping()
        result = {'status': 'ok' if pong else 'fail'}
        if result['status'] != 'ok':
            logger.warning('Redis health check returned unexpected response')
        return result
    except Exception as e:  # pragma: no cover - best effort
        logger.warning('Redis health check failed', error=str(e))
        return {'status': 'fail', 'error': str(e)}


def _db_check(alias='default'):
    started = time.time()
    try:
        conn = connections[alias]
        conn.cursor().execute('SELECT 1')
        latency = round((time.time() - started) * 1000, 2)
        logger.debug('Database health check succeeded', alias=alias, latency_ms=latency)
        return {'status': 'ok', 'latency_ms': latency}
    except OperationalError as e:
        logger.warning('Database health check encountered operational error', alias=alias, error=str(e))
        return {'status': 'fail', 'error': str(e)}
    except Exception as e:
        logger.error('Database health check failed unexpectedly', alias=alias, error=str(e), exception=e.__class__.__name__)
        return {'status': 'fail', 'error': str(e), 'exception': e.__class__.__name__}


def _collaborator_config():
    """Report whether the remote lookups are configured; no network calls are made."""
    report = {}
    for name, setting_name in COLLABORATOR_SETTINGS.items():
        url = getattr(settings, setting_name, '') or ''
        report[name] = {'status': 'configured' if url else 'missing'}
    return report


def live_health(request):
    """Liveness check: process is up and can service requests."""
    logger.debug('Liveness check served')
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """Readiness check: verifies local dependencies (DB, Redis).

    Collaborator services are listed for visibility only. A down catalog or
    user directory degrades checkout but must not take this process out of
    rotation.
    """
    checks = {'database': _db_check()}

    redis_url = getattr(settings, 'REDIS_URL', None) if getattr(settings, 'REDIS_HEALTHCHECK', True) else None
    if redis_url:
        checks['redis'] = _redis_ping(redis_url)
    else:
        checks['redis'] = {'status': 'skipped', 'detail': 'REDIS_URL not set'}

    failing = [name for name, r in checks.items() if r.get('status') == 'fail']
    overall_status = 'ok' if not failing else 'degraded'
    http_status = 200 if not failing else 503
    payload = {
        'status': overall_status,
        'checks': checks,
        'collaborators': _collaborator_config(),
    }
    logger.info('Readiness check evaluated', status=overall_status, failing_components=failing)
    return JsonResponse(payload, status=http_status)
