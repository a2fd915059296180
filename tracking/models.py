from django.db import models


class TrackedOrder(models.Model):
    """Orders whose Purchase event has already been sent."""
    order_id = models.CharField(max_length=64, unique=True)
    value = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, blank=True)
    created = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created']

    def __str__(self):
        return f"Order {self.order_id}"
