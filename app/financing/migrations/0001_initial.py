import uuid
from decimal import Decimal

import django.db.models.deletion
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="FinancingOffer",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, help_text="Unique identifier for this record", primary_key=True, serialize=False)),
                ("usage", models.CharField(db_index=True, help_text="Usage token correlating the offer with provider callbacks", max_length=255)),
                ("registration_url", models.URLField(help_text="Provider URL where the customer completes the application", max_length=2048)),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("mode", models.CharField(choices=[("live", "Live"), ("test", "Test")], default="test", max_length=10)),
                ("state", django_fsm.FSMField(choices=[("pending_funding", "Pending Funding"), ("payment_received", "Payment Received"), ("cancelled", "Cancelled"), ("timed_out", "Timed Out")], db_index=True, default="pending_funding", help_text="Current state of the offer (managed by FSM)", max_length=50)),
                ("reference_id", models.CharField(blank=True, default="", help_text="Provider reference id of the completed financing", max_length=255)),
                ("payment_received_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("timed_out_at", models.DateTimeField(blank=True, null=True)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="financing_offers", to="orders.order")),
            ],
            options={
                "verbose_name": "Financing Offer",
                "verbose_name_plural": "Financing Offers",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["order", "state"], name="fin_offer_order_state_idx")],
            },
        ),
    ]
