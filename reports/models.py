from django.conf import settings
from django.db import models, transaction


class ReportViewManager(models.Manager):

    def visible_to(self, user):
        """System views plus the views ``user`` created."""
        return self.filter(models.Q(is_system=True) | models.Q(owner=user))


class ReportView(models.Model):
    """A saved export layout: which fields, in which order, in which format."""

    FORMAT_XLSX = 'xlsx'
    FORMAT_CSV = 'csv'
    FORMAT_CHOICES = [
        (FORMAT_XLSX, 'Excel (xlsx)'),
        (FORMAT_CSV, 'CSV'),
    ]

    name = models.CharField(max_length=50)
    fields = models.JSONField(default=list, help_text='Ordered list of field identifiers')
    export_format = models.CharField(max_length=4, choices=FORMAT_CHOICES, default=FORMAT_XLSX)
    use_24_hour = models.BooleanField(default=False, help_text='Render the time range as HH:MM-HH:MM')
    is_default = models.BooleanField(default=False)
    is_system = models.BooleanField(default=False)
    description = models.CharField(max_length=200, blank=True, default='')
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='report_views'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ReportViewManager()

    class Meta:
        ordering = ['-is_default', 'name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        # Only one default per owner (system views share the null owner)
        with transaction.atomic():
            if self.is_default:
                ReportView.objects.filter(owner=self.owner, is_default=True).exclude(pk=self.pk).update(
                    is_default=False
                )
            super().save(*args, **kwargs)
