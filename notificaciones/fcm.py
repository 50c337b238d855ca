import os
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin import exceptions as firebase_exceptions
from django.conf import settings

from .exceptions import ErrorEntregaTransitorio, TokenInvalidoError

logger = logging.getLogger(__name__)

_initialized = False
_init_lock = threading.Lock()


class ResultadoEntrega(str, Enum):
    ENTREGADA = "entregada"
    TOKEN_INVALIDO = "token_invalido"
    FALLO_TRANSITORIO = "fallo_transitorio"


@dataclass(frozen=True)
class MensajePush:
    titulo: str
    cuerpo: str
    tipo: str
    elemento_id: int
    datos: dict = field(default_factory=dict)

    def data(self) -> dict[str, str]:
        # FCM solo acepta valores string en data
        base = {"tipo": self.tipo, "elemento_id": self.elemento_id}
        base.update(self.datos)
        return {k: str(v) for k, v in base.items()}


def init_firebase() -> bool:
    # los workers del despacho llegan aqui en paralelo en el primer envio
    with _init_lock:
        return _init_firebase()


def _init_firebase() -> bool:
    global _initialized

    if _initialized:
        return bool(firebase_admin._apps)

    path = str(getattr(settings, "FIREBASE_SERVICE_ACCOUNT_PATH", "")).strip()
    logger.info(f"[FCM] Service account path: {path}")

    if not path or not os.path.exists(path):
        logger.warning(f"[FCM] Service account no encontrado: {path}. Push deshabilitado.")
        _initialized = True
        return False

    try:
        cred = credentials.Certificate(path)
        firebase_admin.initialize_app(cred, {"httpTimeout": settings.FCM_TIMEOUT})
        logger.info("[FCM] Inicializado correctamente")
    except Exception as e:
        logger.exception(f"[FCM] Error inicializando Firebase: {e}")
    finally:
        _initialized = True

    return bool(firebase_admin._apps)


def es_token_invalido(exc: Exception) -> bool:
    """True solo si FCM dice explicitamente que el token no sirve."""
    if isinstance(exc, (messaging.UnregisteredError, messaging.SenderIdMismatchError)):
        return True
    if isinstance(exc, firebase_exceptions.NotFoundError):
        return True
    if isinstance(exc, firebase_exceptions.InvalidArgumentError):
        return "registration token" in str(exc).lower()
    return False


class EnviadorFCM:
    """Entrega un push a un token y clasifica el resultado."""

    def _entregar(self, token: str, mensaje: MensajePush) -> str:
        if not init_firebase():
            raise ErrorEntregaTransitorio("Firebase no inicializado. Push omitido.")

        message = messaging.Message(
            notification=messaging.Notification(title=mensaje.titulo, body=mensaje.cuerpo),
            data=mensaje.data(),
            token=token,
        )

        try:
            return messaging.send(message)
        except firebase_exceptions.FirebaseError as e:
            if es_token_invalido(e):
                raise TokenInvalidoError(token, str(e)) from e
            raise ErrorEntregaTransitorio(str(e)) from e

    def enviar(self, token: str, mensaje: MensajePush) -> ResultadoEntrega:
        try:
            message_id = self._entregar(token, mensaje)
        except TokenInvalidoError as e:
            logger.warning(f"[FCM] Token inválido {token[:20]}...: {e}")
            return ResultadoEntrega.TOKEN_INVALIDO
        except ErrorEntregaTransitorio as e:
            logger.warning(f"[FCM] Fallo transitorio token {token[:20]}...: {e}")
            return ResultadoEntrega.FALLO_TRANSITORIO
        except Exception as e:
            # errores desconocidos nunca borran el token
            logger.exception(f"[FCM] Error inesperado enviando push: {e}")
            return ResultadoEntrega.FALLO_TRANSITORIO

        logger.debug(f"[FCM] Entregado {message_id}")
        return ResultadoEntrega.ENTREGADA
