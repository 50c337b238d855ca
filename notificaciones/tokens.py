from django.utils import timezone

from .models import DeviceToken


def tokens_de(usuario_id) -> list[str]:
    return list(
        DeviceToken.objects.filter(usuario_id=usuario_id)
        .order_by("created_at")
        .values_list("fcm_token", flat=True)
    )


def registrar_token(usuario_id, token: str, platform: str = "android") -> DeviceToken:
    """Guarda el token; si ya existia con otro usuario pasa al nuevo dueño."""
    obj, _ = DeviceToken.objects.update_or_create(
        fcm_token=token,
        defaults={"usuario_id": usuario_id, "platform": platform, "updated_at": timezone.now()},
    )
    return obj


def eliminar_token(token: str, usuario_id=None) -> int:
    qs = DeviceToken.objects.filter(fcm_token=token)
    if usuario_id is not None:
        qs = qs.filter(usuario_id=usuario_id)
    deleted_count, _ = qs.delete()
    return deleted_count
