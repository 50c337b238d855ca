
from django.db import DatabaseError
from django.utils import timezone

from .exceptions import ErrorEscrituraHistorial
from .models import HistorialNotificacion


def registrar_notificacion(*, usuario_id, elemento_id: int, tipo: str, titulo: str,
                           mensaje: str, fecha=None) -> HistorialNotificacion:
    """Inserta una sola fila de historial."""
    try:
        return HistorialNotificacion.objects.create(
            usuario_id=usuario_id,
            elemento_id=elemento_id,
            tipo=tipo,
            titulo=titulo[:150],
            mensaje=mensaje,
            fecha=fecha or timezone.localdate(),
        )
    except DatabaseError as e:
        raise ErrorEscrituraHistorial(
            f"No se pudo registrar {tipo} para elemento {elemento_id}: {e}"
        ) from e

def existe_notificacion(usuario_id, elemento_id: int, tipo: str, fecha=None) -> bool:
    return HistorialNotificacion.objects.filter(
        usuario_id=usuario_id,
        elemento_id=elemento_id,
        tipo=tipo,
        fecha=fecha or timezone.localdate(),
    ).exists()

def listar_historial(usuario_id, limite: int | None = 100) -> list[HistorialNotificacion]:
    qs = HistorialNotificacion.objects.filter(usuario_id=usuario_id).order_by("-created_at", "-id")
    if limite:
        qs = qs[:limite]
    return list(qs)
