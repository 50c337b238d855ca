"""
URL configuration for the competencias project.

API routes:
    /api/academico/       materias, elementos, saberes y recuperatorios
    /api/notificaciones/  tokens de dispositivos, historial y ejecucion manual
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path("api/academico/", include("academico_api.urls")),
    path("api/notificaciones/", include("notificaciones.urls")),
]
