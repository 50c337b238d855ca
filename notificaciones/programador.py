"""Programador del ciclo de notificaciones.

Usa APScheduler (BackgroundScheduler) con tres trabajos:

- cada 1 hora
- cada 6 horas
- una ejecucion unica NOTIFICACIONES_RETRASO_INICIAL segundos tras arrancar

Las cadencias se superponen; la deduplicacion por dia del
escaner evita envios repetidos y el candado del ciclo serializa los
disparos que coinciden en el tiempo.

Example:
    from notificaciones.programador import get_programador

    programador = get_programador()
    programador.start()
    ...
    programador.stop()
"""
import logging
import threading
from datetime import timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger
from django.conf import settings
from django.db import close_old_connections
from django.utils import timezone

from .ciclo import CicloNotificaciones, ResumenCiclo

logger = logging.getLogger(__name__)


class ProgramadorNotificaciones:
    CADENCIAS_HORAS = (1, 6)

    def __init__(self, ciclo: CicloNotificaciones | None = None,
                 retraso_inicial: int | None = None,
                 cadencias_horas: tuple[int, ...] | None = None):
        self.ciclo = ciclo or CicloNotificaciones()
        if retraso_inicial is None:
            retraso_inicial = settings.NOTIFICACIONES_RETRASO_INICIAL
        self.retraso_inicial = retraso_inicial
        self.cadencias_horas = tuple(cadencias_horas or self.CADENCIAS_HORAS)
        self._scheduler: BackgroundScheduler | None = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        if self.is_running:
            logger.warning("[PROGRAMADOR] Ya estaba iniciado")
            return

        zona = settings.TIME_ZONE
        scheduler = BackgroundScheduler(
            timezone=zona,
            job_defaults={"coalesce": True, "max_instances": 1},
        )

        for horas in self.cadencias_horas:
            scheduler.add_job(
                self._disparar,
                IntervalTrigger(hours=horas, timezone=zona),
                id=f"notificaciones_cada_{horas}h",
                name=f"Notificaciones de vencimiento cada {horas}h",
                replace_existing=True,
            )

        scheduler.add_job(
            self._disparar,
            DateTrigger(run_date=timezone.now() + timedelta(seconds=self.retraso_inicial), timezone=zona),
            id="notificaciones_inicial",
            name="Notificaciones de vencimiento (arranque)",
            replace_existing=True,
        )

        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            f"[PROGRAMADOR] Iniciado: cada {', '.join(f'{h}h' for h in self.cadencias_horas)} "
            f"y una vez en {self.retraso_inicial}s"
        )

    def stop(self, wait: bool = False) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("[PROGRAMADOR] Detenido")

    def jobs(self) -> list:
        if self._scheduler is None:
            return []
        return self._scheduler.get_jobs()

    def ejecutar_ahora(self) -> ResumenCiclo:
        return self.ciclo.ejecutar()

    def _disparar(self) -> None:
        # hilo del scheduler: conexiones propias
        close_old_connections()
        try:
            resumen = self.ciclo.ejecutar()
        finally:
            close_old_connections()

        if resumen.exito:
            logger.info(f"[PROGRAMADOR] Ciclo ok: {resumen.to_dict()}")
        else:
            logger.warning(f"[PROGRAMADOR] Ciclo no completado: {resumen.error}")


_programador: ProgramadorNotificaciones | None = None
_programador_lock = threading.Lock()


def get_programador() -> ProgramadorNotificaciones:
    global _programador

    with _programador_lock:
        if _programador is None:
            _programador = ProgramadorNotificaciones()
        return _programador
