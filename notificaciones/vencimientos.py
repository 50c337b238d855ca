"""Escaner de vencimientos de elementos de competencia.

Produce dos listas de candidatos a notificar:

- vencidos:   fecha_limite < ahora
- por_vencer: ahora <= fecha_limite <= ahora + 7 dias

En ambas se excluyen los elementos completados y los que ya tienen un
registro de historial del mismo tipo para el docente en el dia de hoy.
La deduplicacion se hace por claves estructuradas (usuario, elemento,
tipo, fecha), nunca por el texto del mensaje.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from django.db import DatabaseError
from django.db.models import Exists, OuterRef
from django.utils import timezone

from db.models import ElementosCompetencia

from .exceptions import ErrorAccesoDatos
from .models import HistorialNotificacion

logger = logging.getLogger(__name__)

VENTANA_POR_VENCER = timedelta(days=7)


@dataclass(frozen=True)
class Candidato:
    elemento_id: int
    usuario_id: uuid.UUID
    descripcion: str
    materia_id: int
    materia_nombre: str
    fecha_limite: datetime


@dataclass
class ResultadoEscaneo:
    vencidos: list[Candidato] = field(default_factory=list)
    por_vencer: list[Candidato] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.vencidos) + len(self.por_vencer)


class EscanerVencimientos:
    ventana = VENTANA_POR_VENCER

    def escanear(self, ahora: datetime | None = None) -> ResultadoEscaneo:
        ahora = ahora or timezone.now()
        hoy = timezone.localdate(ahora)

        try:
            vencidos = self._candidatos(
                HistorialNotificacion.VENCIDO, hoy,
                fecha_limite__lt=ahora,
            )
            por_vencer = self._candidatos(
                HistorialNotificacion.POR_VENCER, hoy,
                fecha_limite__gte=ahora,
                fecha_limite__lte=ahora + self.ventana,
            )
        except DatabaseError as e:
            raise ErrorAccesoDatos(f"Error consultando vencimientos: {e}") from e

        logger.info(
            f"[VENCIMIENTOS] {len(vencidos)} vencidos, {len(por_vencer)} por vencer ({hoy})"
        )
        return ResultadoEscaneo(vencidos=vencidos, por_vencer=por_vencer)

    def _candidatos(self, tipo: str, hoy, **rango) -> list[Candidato]:
        ya_notificado = HistorialNotificacion.objects.filter(
            usuario_id=OuterRef("materia__docente"),
            elemento_id=OuterRef("pk"),
            tipo=tipo,
            fecha=hoy,
        )

        qs = (
            ElementosCompetencia.objects
            .filter(completado=False, materia__docente__isnull=False, **rango)
            .filter(~Exists(ya_notificado))
            .select_related("materia")
            .order_by("fecha_limite", "id")
        )

        # se materializa aqui para que un error de base aborte el escaneo completo
        return [
            Candidato(
                elemento_id=e.id,
                usuario_id=e.materia.docente_id,
                descripcion=e.descripcion,
                materia_id=e.materia_id,
                materia_nombre=e.materia.nombre,
                fecha_limite=e.fecha_limite,
            )
            for e in qs
        ]
