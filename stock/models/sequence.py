# stock/models/sequence.py

from django.db import models


class TenantSequence(models.Model):
    """
    Durable tenant + year + key counter behind human-readable document numbers.

    current_value stores the LAST issued value (first issue = 1).
    Mutated only by stock.services.sequence.next_sequence (locked increment).
    """

    class Key(models.TextChoices):
        MOVEMENT = "MS", "Stock movement"
        OP = "OP", "OP"
        LI = "LI", "LI"
        OA = "OA", "OA"
        OC = "OC", "OC"
        OV = "OV", "OV"
        LOT = "LOT", "Lot number"

    tenant_id = models.UUIDField()
    year = models.PositiveIntegerField()
    key = models.CharField(max_length=8, choices=Key.choices)

    current_value = models.PositiveIntegerField(default=1)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "year", "key"],
                name="uniq_sequence_tenant_year_key",
            ),
        ]

    def __str__(self):
        return f"{self.tenant_id} | {self.key}{self.year} = {self.current_value}"
