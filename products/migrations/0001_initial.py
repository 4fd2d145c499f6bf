import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("sku", models.CharField(db_index=True, max_length=128)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("generic_name", models.CharField(blank=True, max_length=255, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.UUIDField(blank=True, null=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["tenant_id", "is_active"], name="product_tenant_active_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("tenant_id", "sku"), name="unique_product_sku_per_tenant"),
                ],
            },
        ),
    ]
