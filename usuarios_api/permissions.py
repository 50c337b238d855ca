from rest_framework.permissions import BasePermission


def get_claim(request, key: str, default=None):
    token = getattr(request, "auth", None)
    if token is None:
        return default
    try:
        return token.get(key, default)
    except Exception:
        return default


class EsDocente(BasePermission):
    message = "Solo docentes"

    def has_permission(self, request, view):
        return bool(get_claim(request, "uid")) and get_claim(request, "tipo") in ["docente", "admin"]


class EsAdmin(BasePermission):
    message = "Solo administradores"

    def has_permission(self, request, view):
        return get_claim(request, "tipo") == "admin"
