# stock/management/commands/verify_stock_balances.py

"""
LEDGER VERIFICATION

Recomputes every balance from the immutable movement ledger and compares:

- stored quantity == net sum of movements into / out of its key
- stored quantity >= 0
- no key with net movement activity is missing its balance row

Exit status: non-zero (CommandError) when any drift is found.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q, Sum

from stock.models import InventoryBalance, StockMovement

MovementType = StockMovement.MovementType

# Legs that ADD to the destination key.
INCOMING = Q(to_location__isnull=False) & Q(
    type__in=[MovementType.IN, MovementType.TRANSFER, MovementType.ADJUSTMENT]
)

# Legs that REMOVE from the source key.
OUTGOING = Q(from_location__isnull=False) & (
    Q(type__in=[MovementType.OUT, MovementType.TRANSFER])
    | Q(type=MovementType.ADJUSTMENT, to_location__isnull=True)
)


def expected_quantities(tenant_id=None) -> dict:
    movements = StockMovement.objects.all()
    if tenant_id:
        movements = movements.filter(tenant_id=tenant_id)

    expected: dict = defaultdict(lambda: Decimal("0"))

    incoming = (
        movements.filter(INCOMING)
        .values("tenant_id", "to_location_id", "product_id", "batch_id")
        .annotate(total=Sum("quantity"))
    )
    for row in incoming:
        key = (row["tenant_id"], row["to_location_id"], row["product_id"], row["batch_id"])
        expected[key] += row["total"] or Decimal("0")

    outgoing = (
        movements.filter(OUTGOING)
        .values("tenant_id", "from_location_id", "product_id", "batch_id")
        .annotate(total=Sum("quantity"))
    )
    for row in outgoing:
        key = (row["tenant_id"], row["from_location_id"], row["product_id"], row["batch_id"])
        expected[key] -= row["total"] or Decimal("0")

    return dict(expected)


def find_drifts(tenant_id=None) -> list[dict]:
    expected = expected_quantities(tenant_id)

    balances = InventoryBalance.objects.all()
    if tenant_id:
        balances = balances.filter(tenant_id=tenant_id)

    drifts: list[dict] = []
    seen = set()

    for balance in balances.iterator():
        key = (balance.tenant_id, balance.location_id, balance.product_id, balance.batch_id)
        seen.add(key)
        want = expected.get(key, Decimal("0"))

        if balance.quantity < 0:
            drifts.append({"key": key, "stored": balance.quantity, "expected": want, "reason": "negative"})
        elif balance.quantity != want:
            drifts.append({"key": key, "stored": balance.quantity, "expected": want, "reason": "mismatch"})

    for key, want in expected.items():
        if key not in seen and want != 0:
            drifts.append({"key": key, "stored": None, "expected": want, "reason": "missing"})

    return drifts


class Command(BaseCommand):
    help = "Recompute inventory balances from stock movements and report drift."

    def add_arguments(self, parser):
        parser.add_argument(
            "--tenant",
            dest="tenant_id",
            help="Only verify this tenant (UUID).",
        )

    def handle(self, *args, **options):
        raw_tenant = options.get("tenant_id")
        tenant_id = None
        if raw_tenant:
            try:
                tenant_id = uuid.UUID(str(raw_tenant))
            except ValueError:
                raise CommandError(f"Invalid --tenant value: {raw_tenant}")

        self.stdout.write(self.style.MIGRATE_HEADING("Stock ledger verification"))
        self.stdout.write(f"Tenant: {tenant_id or 'ALL'}")

        drifts = find_drifts(tenant_id)

        if not drifts:
            self.stdout.write(self.style.SUCCESS("OK: balances match the movement ledger."))
            return

        for d in drifts:
            t, location_id, product_id, batch_id = d["key"]
            self.stderr.write(
                self.style.ERROR(
                    f"[{d['reason']}] tenant={t} location={location_id} "
                    f"product={product_id} batch={batch_id or '-'} "
                    f"stored={d['stored']} expected={d['expected']}"
                )
            )

        raise CommandError(f"{len(drifts)} balance drift(s) found")
