from django.apps import AppConfig


class MeasurementsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'measurements'
    verbose_name = 'Measurements'

    def ready(self):
        import measurements.signals  # noqa: F401
