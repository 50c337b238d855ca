import threading

from django.core.management.base import BaseCommand, CommandError

from notificaciones.ciclo import CicloNotificaciones
from notificaciones.programador import ProgramadorNotificaciones


class Command(BaseCommand):
    help = "Ejecuta un ciclo de notificaciones de vencimiento (o deja el programador corriendo con --programar)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--programar",
            action="store_true",
            help="Arranca el programador (cada 1h y 6h) y queda en primer plano hasta Ctrl+C.",
        )

    def handle(self, *args, **options):
        if options["programar"]:
            self._programar()
            return

        resumen = CicloNotificaciones().ejecutar()
        if not resumen.exito:
            raise CommandError(f"Ciclo no completado: {resumen.error}")

        self.stdout.write(self.style.SUCCESS(
            f"Vencidos: {resumen.vencidos} | Por vencer: {resumen.por_vencer} | "
            f"Entregas: {resumen.entregas} | Tokens eliminados: {resumen.tokens_eliminados} | "
            f"Historial fallido: {resumen.historial_fallidos}"
        ))

    def _programar(self):
        programador = ProgramadorNotificaciones()
        programador.start()
        self.stdout.write(self.style.SUCCESS("Programador iniciado. Ctrl+C para detener."))
        try:
            threading.Event().wait()
        except KeyboardInterrupt:
            pass
        finally:
            programador.stop(wait=True)
            self.stdout.write("Programador detenido.")
