# Modelos mapeados sobre el esquema existente de PostgreSQL.
# Las tablas las crea y migra el esquema heredado (managed=False);
# no renombrar db_table ni nombres de columnas.
from django.db import models
import uuid
from django.utils import timezone


class Usuarios(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tipo = models.TextField()  # docente | admin
    correo = models.CharField(unique=True, max_length=150)
    nombres = models.CharField(max_length=150, blank=True, default="")
    activo = models.BooleanField(default=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'usuarios'

    def __str__(self):
        return f"{self.correo} ({self.tipo}) - {'Activo' if self.activo else 'Inactivo'}"


class Materias(models.Model):
    id = models.BigAutoField(primary_key=True)
    nombre = models.CharField(max_length=200)
    docente = models.ForeignKey(
        'Usuarios', models.DO_NOTHING, db_column='docente_id', blank=True, null=True,
        related_name='materias',
    )
    rec_tomados = models.IntegerField(default=0)
    elem_completados = models.IntegerField(default=0)
    elem_evaluados = models.IntegerField(default=0)
    vigente = models.BooleanField(default=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'materias'

    def __str__(self):
        return f"{self.nombre} {'(Vigente)' if self.vigente else '(No vigente)'}"


class ElementosCompetencia(models.Model):
    id = models.BigAutoField(primary_key=True)
    materia = models.ForeignKey(
        'Materias', models.DO_NOTHING, db_column='materia_id', related_name='elementos',
    )
    descripcion = models.TextField()
    fecha_limite = models.DateTimeField(blank=True, null=True)
    completado = models.BooleanField(default=False)
    evaluado = models.BooleanField(default=False)
    comentario = models.TextField(blank=True, null=True)
    fecha_registro = models.DateTimeField(blank=True, null=True)
    fecha_evaluado = models.DateTimeField(blank=True, null=True)
    saberes_totales = models.IntegerField(default=0)
    saberes_completados = models.IntegerField(default=0)

    class Meta:
        managed = False
        db_table = 'elementos_competencia'

    def __str__(self):
        return f"Elemento: {self.descripcion[:50]} - {'Completado' if self.completado else 'Pendiente'}"


class SaberesMinimos(models.Model):
    id = models.BigAutoField(primary_key=True)
    elemento = models.ForeignKey(
        'ElementosCompetencia', models.DO_NOTHING, db_column='elemento_competencia_id',
        related_name='saberes',
    )
    descripcion = models.TextField()
    completado = models.BooleanField(default=False)

    class Meta:
        managed = False
        db_table = 'saberes_minimos'

    def __str__(self):
        return f"Saber: {self.descripcion[:50]} {'(Completado)' if self.completado else ''}"


class Recuperatorios(models.Model):
    id = models.BigAutoField(primary_key=True)
    elemento = models.ForeignKey(
        'ElementosCompetencia', models.DO_NOTHING, db_column='elemento_competencia_id',
        related_name='recuperatorios',
    )
    completado = models.BooleanField(default=False)
    fecha_evaluado = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        managed = False
        db_table = 'recuperatorios'

    def __str__(self):
        return f"Recuperatorio {self.id} - Elemento {self.elemento_id} - {'Completado' if self.completado else 'Pendiente'}"
