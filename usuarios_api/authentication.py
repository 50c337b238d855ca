from types import SimpleNamespace

from django.core.exceptions import ValidationError
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from db.models import Usuarios

TIPOS_CON_ACCESO = ("docente", "admin")


def _rechazar(motivo):
    raise AuthenticationFailed(motivo, code="token_not_valid")


class UsuariosJWTAuthentication(JWTAuthentication):
    """
    JWT contra la tabla `usuarios` (UUID), no contra auth_user.

    El token trae `uid` y `tipo`. El usuario tiene que existir, estar
    activo, ser docente o admin y conservar el mismo tipo que dice el token
    (un cambio de rol invalida los tokens emitidos antes).
    """

    def get_user(self, validated_token):
        uid = validated_token.get("uid")
        if not uid:
            _rechazar("Token sin uid")

        try:
            usuario = Usuarios.objects.get(id=uid)
        except (Usuarios.DoesNotExist, ValidationError, ValueError):
            _rechazar("Usuario no existe")

        if not usuario.activo:
            _rechazar("Usuario inactivo")

        if usuario.tipo not in TIPOS_CON_ACCESO:
            _rechazar("Tipo de usuario sin acceso")

        if validated_token.get("tipo") != usuario.tipo:
            _rechazar("El tipo del token no coincide con el usuario")

        return SimpleNamespace(
            is_authenticated=True,
            id=usuario.id,
            tipo=usuario.tipo,
            correo=usuario.correo,
            nombres=usuario.nombres,
        )
