import logging
import math
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from .exceptions import ErrorEscrituraHistorial
from .fcm import EnviadorFCM, MensajePush, ResultadoEntrega
from .historial import registrar_notificacion
from .models import HistorialNotificacion
from .tokens import eliminar_token, tokens_de
from .vencimientos import Candidato

logger = logging.getLogger(__name__)


@dataclass
class ResultadoDespacho:
    candidato: Candidato
    tipo: str
    resultados: dict[str, ResultadoEntrega] = field(default_factory=dict)
    tokens_eliminados: int = 0
    historial_registrado: bool = False

    @property
    def entregas(self) -> int:
        return sum(1 for r in self.resultados.values() if r is ResultadoEntrega.ENTREGADA)


def componer_mensaje(candidato: Candidato, tipo: str) -> tuple[str, str]:
    fecha = timezone.localtime(candidato.fecha_limite).strftime("%d/%m/%Y %H:%M")

    if tipo == HistorialNotificacion.VENCIDO:
        titulo = "⚠️ Elemento de competencia vencido"
        cuerpo = (
            f"{candidato.descripcion}\n"
            f"Materia: {candidato.materia_nombre}\n"
            f"Venció el {fecha}"
        )
    else:
        titulo = "⏰ Elemento de competencia por vencer"
        cuerpo = (
            f"{candidato.descripcion}\n"
            f"Materia: {candidato.materia_nombre}\n"
            f"Vence el {fecha}"
        )
    return titulo, cuerpo


class DespachadorNotificaciones:
    """Notifica un candidato a todos los dispositivos de su docente.

    Los intentos por token son independientes y se lanzan en paralelo
    (acotado por FCM_MAX_CONCURRENCIA). Los tokens inválidos se borran y,
    pase lo que pase con las entregas, se escribe un único registro de
    historial por candidato.
    """

    def __init__(self, enviador=None, max_concurrencia: int | None = None, timeout: float | None = None):
        self.enviador = enviador or EnviadorFCM()
        self.max_concurrencia = max_concurrencia or settings.FCM_MAX_CONCURRENCIA
        self.timeout = settings.FCM_TIMEOUT if timeout is None else timeout

    def despachar(self, candidato: Candidato, tipo: str, ahora=None) -> ResultadoDespacho:
        ahora = ahora or timezone.now()
        titulo, cuerpo = componer_mensaje(candidato, tipo)
        resultado = ResultadoDespacho(candidato=candidato, tipo=tipo)

        tokens = tokens_de(candidato.usuario_id)

        if not tokens:
            logger.info(
                f"[DESPACHO] Usuario {candidato.usuario_id} sin tokens; "
                f"elemento {candidato.elemento_id} solo se registra"
            )
        else:
            mensaje = MensajePush(
                titulo=titulo,
                cuerpo=cuerpo,
                tipo=tipo,
                elemento_id=candidato.elemento_id,
                datos={"materia_id": candidato.materia_id, "accion": "ver_elemento"},
            )
            resultado.resultados = self._enviar_a_todos(tokens, mensaje)

            for token, r in resultado.resultados.items():
                if r is not ResultadoEntrega.TOKEN_INVALIDO:
                    continue
                try:
                    resultado.tokens_eliminados += eliminar_token(token)
                except DatabaseError as e:
                    logger.exception(f"[DESPACHO] No se pudo eliminar token {token[:20]}...: {e}")

            if resultado.tokens_eliminados:
                logger.info(f"[DESPACHO] Tokens inválidos eliminados: {resultado.tokens_eliminados}")

        try:
            registrar_notificacion(
                usuario_id=candidato.usuario_id,
                elemento_id=candidato.elemento_id,
                tipo=tipo,
                titulo=titulo,
                mensaje=cuerpo,
                fecha=timezone.localdate(ahora),
            )
            resultado.historial_registrado = True
        except ErrorEscrituraHistorial as e:
            logger.error(f"[DESPACHO] {e}")

        logger.info(
            f"[DESPACHO] {tipo} elemento {candidato.elemento_id}: "
            f"{resultado.entregas}/{len(tokens)} entregas"
        )
        return resultado

    def _enviar_a_todos(self, tokens: list[str], mensaje: MensajePush) -> dict[str, ResultadoEntrega]:
        workers = max(1, min(len(tokens), self.max_concurrencia))
        # cada tanda de workers tiene su propio timeout por intento
        limite = self.timeout * math.ceil(len(tokens) / workers)

        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fcm")
        try:
            futuros = {pool.submit(self.enviador.enviar, token, mensaje): token for token in tokens}
            wait(futuros, timeout=limite)

            resultados = {}
            for futuro, token in futuros.items():
                if not futuro.done():
                    logger.warning(f"[DESPACHO] Timeout entregando a {token[:20]}...")
                    resultados[token] = ResultadoEntrega.FALLO_TRANSITORIO
                elif futuro.exception() is not None:
                    logger.error(f"[DESPACHO] Error entregando a {token[:20]}...: {futuro.exception()}")
                    resultados[token] = ResultadoEntrega.FALLO_TRANSITORIO
                else:
                    resultados[token] = futuro.result()
            return resultados
        finally:
            # no se espera a intentos colgados
            pool.shutdown(wait=False, cancel_futures=True)
