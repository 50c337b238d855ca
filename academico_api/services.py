# academico_api/services.py
"""Operaciones sobre materias, elementos de competencia, saberes y recuperatorios.

Todas las funciones que reciben ``docente_id`` restringen la consulta a las
materias de ese docente; con ``docente_id=None`` (administradores) no hay
restriccion.
"""
import re

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from db.models import ElementosCompetencia, Materias, Recuperatorios, SaberesMinimos, Usuarios

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

CAMPOS_MATERIA = ("rec_tomados", "elem_completados", "elem_evaluados", "vigente")
CAMPOS_ELEMENTO = (
    "evaluado", "comentario", "fecha_registro", "fecha_evaluado",
    "fecha_limite", "saberes_completados", "completado",
)
CAMPOS_RECUPERATORIO = ("completado", "fecha_evaluado")


class ElementoNoExiste(Exception):
    pass


def es_correo_valido(correo: str | None) -> bool:
    return bool(correo) and bool(EMAIL_RE.match(correo))


def correo_registrado(correo: str) -> bool:
    return Usuarios.objects.filter(correo__iexact=correo.strip()).exists()


def _aplicar(obj, datos: dict, permitidos) -> list[str]:
    campos = [k for k in permitidos if k in datos]
    for k in campos:
        setattr(obj, k, datos[k])
    return campos


# -------------------------------
# Materias
# -------------------------------
def materias_de_docente(docente_id):
    return Materias.objects.filter(docente_id=docente_id).order_by("nombre")


def materias_por_correo(correo: str):
    return Materias.objects.filter(docente__correo__iexact=correo.strip()).order_by("nombre")


def actualizar_materia(materia_id, datos: dict, docente_id=None) -> Materias | None:
    qs = Materias.objects.filter(id=materia_id)
    if docente_id is not None:
        qs = qs.filter(docente_id=docente_id)
    materia = qs.first()
    if materia is None:
        return None

    campos = _aplicar(materia, datos, CAMPOS_MATERIA)
    materia.updated_at = timezone.now()
    materia.save(update_fields=campos + ["updated_at"])
    return materia


# -------------------------------
# Elementos de competencia
# -------------------------------
def _elementos(docente_id=None):
    qs = ElementosCompetencia.objects.all()
    if docente_id is not None:
        qs = qs.filter(materia__docente_id=docente_id)
    return qs


def elementos_de_materia(materia_id, docente_id=None):
    return _elementos(docente_id).filter(materia_id=materia_id).order_by("descripcion")


def actualizar_elemento(elemento_id, datos: dict, docente_id=None) -> ElementosCompetencia | None:
    elemento = _elementos(docente_id).filter(id=elemento_id).first()
    if elemento is None:
        return None

    campos = _aplicar(elemento, datos, CAMPOS_ELEMENTO)
    elemento.save(update_fields=campos)
    return elemento


# -------------------------------
# Saberes minimos
# -------------------------------
def saberes_de_elemento(elemento_id, docente_id=None):
    qs = SaberesMinimos.objects.filter(elemento_id=elemento_id)
    if docente_id is not None:
        qs = qs.filter(elemento__materia__docente_id=docente_id)
    return qs.order_by("id")


def marcar_saber(saber_id, completado: bool, docente_id=None) -> SaberesMinimos | None:
    """Cambia el estado del saber y recalcula los contadores del elemento."""
    qs = SaberesMinimos.objects.filter(id=saber_id)
    if docente_id is not None:
        qs = qs.filter(elemento__materia__docente_id=docente_id)

    with transaction.atomic():
        saber = qs.select_for_update().first()
        if saber is None:
            return None

        saber.completado = completado
        saber.save(update_fields=["completado"])

        saberes = SaberesMinimos.objects.filter(elemento_id=saber.elemento_id)
        ElementosCompetencia.objects.filter(id=saber.elemento_id).update(
            saberes_totales=saberes.count(),
            saberes_completados=saberes.filter(completado=True).count(),
        )
    return saber


# -------------------------------
# Recuperatorios
# -------------------------------
def _recuperatorios(docente_id=None):
    qs = Recuperatorios.objects.all()
    if docente_id is not None:
        qs = qs.filter(elemento__materia__docente_id=docente_id)
    return qs


def recuperatorios_de_elemento(elemento_id, docente_id=None):
    return _recuperatorios(docente_id).filter(elemento_id=elemento_id).order_by("created_at", "id")


def crear_recuperatorio(elemento_id, completado: bool, fecha_evaluado=None, docente_id=None) -> Recuperatorios:
    with transaction.atomic():
        elemento = _elementos(docente_id).filter(id=elemento_id).first()
        if elemento is None:
            raise ElementoNoExiste(elemento_id)

        rec = Recuperatorios.objects.create(
            elemento_id=elemento.id,
            completado=completado,
            fecha_evaluado=fecha_evaluado,
            created_at=timezone.now(),
        )
        Materias.objects.filter(id=elemento.materia_id).update(
            rec_tomados=F("rec_tomados") + 1,
            updated_at=timezone.now(),
        )
    return rec


def actualizar_recuperatorio(recuperatorio_id, datos: dict, docente_id=None) -> Recuperatorios | None:
    rec = _recuperatorios(docente_id).filter(id=recuperatorio_id).first()
    if rec is None:
        return None

    campos = _aplicar(rec, datos, CAMPOS_RECUPERATORIO)
    rec.save(update_fields=campos)
    return rec


def eliminar_recuperatorio(recuperatorio_id, docente_id=None) -> bool:
    rec = _recuperatorios(docente_id).filter(id=recuperatorio_id).first()
    if rec is None:
        return False
    rec.delete()
    return True
