"""
WSGI config for the competencias project.

When NOTIFICACIONES_PROGRAMADOR_ACTIVO is set the push notification
scheduler is started once per worker process.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()

from django.conf import settings  # noqa: E402

if settings.NOTIFICACIONES_PROGRAMADOR_ACTIVO:
    from notificaciones.programador import get_programador

    get_programador().start()
