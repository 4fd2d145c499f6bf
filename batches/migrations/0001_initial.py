import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Batch",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("batch_number", models.CharField(max_length=128)),
                ("manufacturing_date", models.DateField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("RELEASED", "Released"), ("QUARANTINE", "Quarantine"), ("REJECTED", "Rejected")],
                        default="RELEASED",
                        max_length=16,
                    ),
                ),
                ("opened_at", models.DateTimeField(blank=True, null=True)),
                ("opened_by", models.UUIDField(blank=True, null=True)),
                ("version", models.PositiveIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.UUIDField(blank=True, null=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="batches",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["expires_at", "created_at"],
                "indexes": [
                    models.Index(fields=["tenant_id", "product", "expires_at"], name="batch_tenant_product_exp_idx"),
                    models.Index(fields=["tenant_id", "status"], name="batch_tenant_status_idx"),
                    models.Index(fields=["opened_at"], name="batch_opened_at_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant_id", "product", "batch_number"),
                        name="unique_batch_per_tenant_product",
                    ),
                ],
            },
        ),
    ]
