"""Errores del motor de notificaciones.

Ninguno es fatal para el proceso: el ciclo de notificaciones los captura
todos en su borde.
"""


class NotificacionError(Exception):
    pass


class ErrorAccesoDatos(NotificacionError):
    """Fallo leyendo la base; el escaneo se aborta y el ciclo se omite."""


class TokenInvalidoError(NotificacionError):
    """FCM indico que el token no existe o no pertenece al proyecto."""

    def __init__(self, token: str, mensaje: str = ""):
        self.token = token
        super().__init__(mensaje or f"Token inválido: {token[:20]}...")


class ErrorEntregaTransitorio(NotificacionError):
    """Intento abandonado; no se reintenta en este ciclo."""


class ErrorEscrituraHistorial(NotificacionError):
    """No se pudo guardar el registro de historial."""
