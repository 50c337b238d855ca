import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DeviceToken",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("usuario_id", models.UUIDField(db_index=True)),
                ("fcm_token", models.TextField(unique=True)),
                ("platform", models.CharField(default="android", max_length=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "device_tokens",
            },
        ),
        migrations.CreateModel(
            name="HistorialNotificacion",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("usuario_id", models.UUIDField(db_index=True)),
                ("elemento_id", models.BigIntegerField(db_index=True)),
                ("tipo", models.CharField(choices=[("vencido", "Vencido"), ("por_vencer", "Por vencer")], max_length=20)),
                ("titulo", models.CharField(max_length=150)),
                ("mensaje", models.TextField()),
                ("fecha", models.DateField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "historial_notificaciones",
                "indexes": [
                    models.Index(fields=["usuario_id", "elemento_id", "tipo", "fecha"], name="historial_dedup_idx"),
                ],
            },
        ),
    ]
