import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("products", "0001_initial"),
        ("batches", "0001_initial"),
        ("warehouses", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="TenantSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_id", models.UUIDField()),
                ("year", models.PositiveIntegerField()),
                (
                    "key",
                    models.CharField(
                        choices=[
                            ("MS", "Stock movement"),
                            ("OP", "OP"),
                            ("LI", "LI"),
                            ("OA", "OA"),
                            ("OC", "OC"),
                            ("OV", "OV"),
                            ("LOT", "Lot number"),
                        ],
                        max_length=8,
                    ),
                ),
                ("current_value", models.PositiveIntegerField(default=1)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant_id", "year", "key"),
                        name="uniq_sequence_tenant_year_key",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="InventoryBalance",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=6,
                        default=Decimal("0"),
                        help_text="Base units on hand (service-managed only)",
                        max_digits=20,
                    ),
                ),
                ("version", models.PositiveIntegerField(default=1)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.UUIDField(blank=True, null=True)),
                (
                    "batch",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="balances",
                        to="batches.batch",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="balances",
                        to="warehouses.location",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="balances",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["tenant_id", "product"], name="balance_tenant_product_idx"),
                    models.Index(fields=["tenant_id", "location"], name="balance_tenant_location_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("batch__isnull", False)),
                        fields=("tenant_id", "location", "product", "batch"),
                        name="uniq_balance_key_with_batch",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("batch__isnull", True)),
                        fields=("tenant_id", "location", "product"),
                        name="uniq_balance_key_without_batch",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gte", 0)),
                        name="chk_balance_quantity_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("number", models.CharField(max_length=32)),
                ("number_year", models.PositiveIntegerField()),
                ("sequence_value", models.PositiveIntegerField()),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("IN", "Stock In"),
                            ("OUT", "Stock Out"),
                            ("TRANSFER", "Transfer"),
                            ("ADJUSTMENT", "Adjustment"),
                        ],
                        max_length=16,
                    ),
                ),
                ("quantity", models.DecimalField(decimal_places=6, max_digits=20)),
                ("presentation_id", models.UUIDField(blank=True, null=True)),
                ("presentation_quantity", models.DecimalField(blank=True, decimal_places=6, max_digits=20, null=True)),
                ("reference_type", models.CharField(blank=True, max_length=64, null=True)),
                ("reference_id", models.CharField(blank=True, max_length=128, null=True)),
                ("note", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_by", models.UUIDField(blank=True, null=True)),
                (
                    "batch",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="batches.batch",
                    ),
                ),
                (
                    "from_location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="outgoing_movements",
                        to="warehouses.location",
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="products.product",
                    ),
                ),
                (
                    "to_location",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incoming_movements",
                        to="warehouses.location",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["tenant_id", "created_at"], name="movement_tenant_created_idx"),
                    models.Index(fields=["tenant_id", "product", "created_at"], name="movement_tenant_product_idx"),
                    models.Index(fields=["batch", "created_at"], name="movement_batch_created_idx"),
                    models.Index(fields=["reference_type", "reference_id"], name="movement_reference_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("tenant_id", "number"),
                        name="uniq_movement_number_per_tenant",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)),
                        name="chk_movement_quantity_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="MovementRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("OPEN", "Open"), ("FULFILLED", "Fulfilled"), ("CANCELLED", "Cancelled")],
                        default="OPEN",
                        max_length=16,
                    ),
                ),
                ("requested_city", models.CharField(max_length=120)),
                ("requested_by", models.UUIDField()),
                ("fulfilled_at", models.DateTimeField(blank=True, null=True)),
                ("fulfilled_by", models.UUIDField(blank=True, null=True)),
                ("note", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "warehouse",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="movement_requests",
                        to="warehouses.warehouse",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["tenant_id", "status"], name="request_tenant_status_idx"),
                    models.Index(fields=["tenant_id", "requested_city", "status"], name="request_tenant_city_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="MovementRequestItem",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("requested_quantity", models.DecimalField(decimal_places=6, max_digits=20)),
                ("remaining_quantity", models.DecimalField(decimal_places=6, default=Decimal("0"), max_digits=20)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movement_request_items",
                        to="products.product",
                    ),
                ),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="stock.movementrequest",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["tenant_id", "product", "remaining_quantity"],
                        name="request_item_open_idx",
                    ),
                ],
            },
        ),
    ]
