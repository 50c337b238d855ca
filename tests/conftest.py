"""Fixtures compartidas.

Las tablas académicas son ``managed=False`` (las crea el esquema heredado);
para las pruebas se marcan como gestionadas y pytest-django las crea con
``--nomigrations``. Firebase nunca se contacta: los envíos pasan por
``EnviadorFalso``.
"""
import threading
import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest
from django.apps import apps
from django.utils import timezone
from rest_framework.test import APIClient

from db.models import ElementosCompetencia, Materias, Usuarios
from notificaciones.fcm import ResultadoEntrega


@pytest.fixture(scope="session", autouse=True)
def tablas_heredadas():
    no_gestionados = [m for m in apps.get_models() if not m._meta.managed]
    for m in no_gestionados:
        m._meta.managed = True
    yield
    for m in no_gestionados:
        m._meta.managed = False


class EnviadorFalso:
    """Devuelve el resultado configurado por token; por defecto ENTREGADA."""

    def __init__(self, resultados=None):
        self.resultados = resultados or {}
        self.enviados = []
        self._lock = threading.Lock()

    def enviar(self, token, mensaje):
        with self._lock:
            self.enviados.append((token, mensaje))
        return self.resultados.get(token, ResultadoEntrega.ENTREGADA)


@pytest.fixture
def enviador():
    return EnviadorFalso()


@pytest.fixture
def ahora():
    return timezone.now()


@pytest.fixture
def crear_docente(db):
    def _crear(correo=None, tipo="docente"):
        return Usuarios.objects.create(
            tipo=tipo,
            correo=correo or f"docente-{uuid.uuid4().hex[:8]}@instituto.edu.ar",
            nombres="Docente Prueba",
        )
    return _crear


@pytest.fixture
def docente(crear_docente):
    return crear_docente("ana.docente@instituto.edu.ar")


@pytest.fixture
def materia(db, docente):
    return Materias.objects.create(nombre="Programación I", docente=docente)


@pytest.fixture
def crear_elemento(db, materia, ahora):
    def _crear(dias=None, completado=False, descripcion="Implementa estructuras de control", **kwargs):
        kwargs.setdefault("materia", materia)
        return ElementosCompetencia.objects.create(
            descripcion=descripcion,
            fecha_limite=None if dias is None else ahora + timedelta(days=dias),
            completado=completado,
            **kwargs,
        )
    return _crear


def cliente_para(usuario):
    client = APIClient()
    client.force_authenticate(
        user=SimpleNamespace(is_authenticated=True, id=usuario.id, tipo=usuario.tipo),
        token={"uid": str(usuario.id), "tipo": usuario.tipo, "correo": usuario.correo},
    )
    return client


@pytest.fixture
def api_docente(docente):
    return cliente_para(docente)


@pytest.fixture
def api_admin(crear_docente):
    return cliente_para(crear_docente("admin@instituto.edu.ar", tipo="admin"))
