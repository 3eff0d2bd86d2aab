from django.apps import AppConfig


class TimerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "timer"
    verbose_name = "Timer"
