from django.apps import AppConfig


class CabinsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'cabins'
    verbose_name = 'Cabin Rentals'

    def ready(self):
        """Import signals when app is ready."""
        import cabins.signals  # noqa
