import logging
import threading
from dataclasses import asdict, dataclass

from django.utils import timezone

from .despachador import DespachadorNotificaciones
from .exceptions import ErrorAccesoDatos
from .models import HistorialNotificacion
from .vencimientos import EscanerVencimientos

logger = logging.getLogger(__name__)


@dataclass
class ResumenCiclo:
    exito: bool
    vencidos: int = 0
    por_vencer: int = 0
    entregas: int = 0
    tokens_eliminados: int = 0
    historial_fallidos: int = 0
    candidatos_fallidos: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class CicloNotificaciones:
    """Un ciclo completo: escanear vencimientos y despachar cada candidato.

    Solo un ciclo puede estar en curso a la vez; una llamada que encuentra
    otro ciclo corriendo devuelve exito=False sin tocar nada. Ningún error
    sale de ``ejecutar``.
    """

    def __init__(self, escaner: EscanerVencimientos | None = None,
                 despachador: DespachadorNotificaciones | None = None):
        self.escaner = escaner or EscanerVencimientos()
        self.despachador = despachador or DespachadorNotificaciones()
        self._en_curso = threading.Lock()

    @property
    def en_curso(self) -> bool:
        return self._en_curso.locked()

    def ejecutar(self, ahora=None) -> ResumenCiclo:
        if not self._en_curso.acquire(blocking=False):
            logger.warning("[CICLO] Ya hay un ciclo en curso. Se omite este disparo.")
            return ResumenCiclo(exito=False, error="ciclo en curso")

        try:
            return self._ejecutar(ahora or timezone.now())
        except ErrorAccesoDatos as e:
            logger.error(f"[CICLO] Escaneo abortado, ciclo omitido: {e}")
            return ResumenCiclo(exito=False, error=str(e))
        except Exception as e:
            logger.exception(f"[CICLO] Error inesperado: {e}")
            return ResumenCiclo(exito=False, error=str(e))
        finally:
            self._en_curso.release()

    def _ejecutar(self, ahora) -> ResumenCiclo:
        escaneo = self.escaner.escanear(ahora)
        resumen = ResumenCiclo(
            exito=True,
            vencidos=len(escaneo.vencidos),
            por_vencer=len(escaneo.por_vencer),
        )

        lotes = (
            (HistorialNotificacion.VENCIDO, escaneo.vencidos),
            (HistorialNotificacion.POR_VENCER, escaneo.por_vencer),
        )
        for tipo, candidatos in lotes:
            for candidato in candidatos:
                try:
                    r = self.despachador.despachar(candidato, tipo, ahora=ahora)
                except Exception as e:
                    logger.exception(
                        f"[CICLO] Error despachando {tipo} elemento {candidato.elemento_id}: {e}"
                    )
                    resumen.candidatos_fallidos += 1
                    continue

                resumen.entregas += r.entregas
                resumen.tokens_eliminados += r.tokens_eliminados
                if not r.historial_registrado:
                    resumen.historial_fallidos += 1

        logger.info(
            f"[CICLO] Terminado: {resumen.vencidos} vencidos, {resumen.por_vencer} por vencer, "
            f"{resumen.entregas} entregas, {resumen.tokens_eliminados} tokens eliminados"
        )
        return resumen
