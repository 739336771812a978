from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


URGENCY_CHOICES = [
    ("R", "Record only"),
    ("0", "Monitor"),
    ("1", "Routine"),
    ("2", "Long-term repair"),
    ("3", "Short-term repair"),
    ("4", "Immediate"),
]

RATING_CHOICES = [("1", "1"), ("2", "2"), ("3", "3"), ("4", "4"), ("U", "U - unable to inspect")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Asset",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "reference_code",
                    models.CharField(
                        max_length=50,
                        unique=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                message="Reference code may only contain letters, numbers, hyphens and underscores.",
                                regex="^[A-Za-z0-9_-]+$",
                            )
                        ],
                    ),
                ),
                ("name", models.CharField(blank=True, max_length=200)),
                (
                    "asset_type",
                    models.CharField(
                        choices=[
                            ("Signage", "Signage"),
                            ("Guardrail", "Guardrail"),
                            ("Traffic Signal", "Traffic Signal"),
                            ("Gantry", "Gantry"),
                            ("Fence", "Fence"),
                            ("Safety Barrier", "Safety Barrier"),
                            ("Guidepost", "Guidepost"),
                            ("Road Marking", "Road Marking"),
                            ("Raised Road Marker", "Raised Road Marker"),
                        ],
                        max_length=30,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                            ("maintenance", "Under maintenance"),
                            ("decommissioned", "Decommissioned"),
                            ("planned", "Planned"),
                        ],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("road_name", models.CharField(blank=True, max_length=150)),
                ("road_number", models.CharField(blank=True, max_length=50)),
                ("region", models.CharField(blank=True, max_length=100)),
                ("depot", models.CharField(blank=True, max_length=100)),
                ("ward", models.CharField(blank=True, max_length=100)),
                ("owner", models.CharField(blank=True, max_length=150)),
                ("installation_date", models.DateField(blank=True, null=True)),
                ("replacement_value", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("useful_life_years", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("latest_ci", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("latest_urgency", models.CharField(blank=True, choices=URGENCY_CHOICES, max_length=1)),
                ("latest_deru", models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ("latest_inspection_date", models.DateField(blank=True, null=True)),
                ("is_deleted", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("modified_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["reference_code"]},
        ),
        migrations.CreateModel(
            name="Inspection",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("inspection_date", models.DateField()),
                ("inspector_name", models.CharField(blank=True, max_length=150)),
                ("ci_health", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("ci_safety", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("ci_final", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("deru_value", models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ("calculated_urgency", models.CharField(blank=True, choices=URGENCY_CHOICES, max_length=1)),
                ("total_remedial_cost", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=14)),
                ("overall_degree", models.CharField(blank=True, max_length=1)),
                ("overall_extent", models.CharField(blank=True, max_length=1)),
                ("overall_relevancy", models.CharField(blank=True, max_length=1)),
                ("remedial_summary", models.TextField(blank=True)),
                ("remarks", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("modified_at", models.DateTimeField(auto_now=True)),
                (
                    "asset",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="inspections", to="tams.asset"
                    ),
                ),
                (
                    "inspector",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="tams_inspections",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-inspection_date", "-id"]},
        ),
        migrations.CreateModel(
            name="ComponentScore",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("component_name", models.CharField(max_length=100)),
                (
                    "degree",
                    models.CharField(
                        choices=[
                            ("X", "X - not present"),
                            ("0", "0 - no defect"),
                            ("1", "1"),
                            ("2", "2"),
                            ("3", "3"),
                            ("U", "U - unable to inspect"),
                        ],
                        max_length=1,
                    ),
                ),
                ("extent", models.CharField(blank=True, choices=RATING_CHOICES, max_length=1)),
                ("relevancy", models.CharField(blank=True, choices=RATING_CHOICES, max_length=1)),
                ("quantity", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("quantity_unit", models.CharField(default="each", max_length=20)),
                ("rate", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("remedial_work", models.CharField(blank=True, max_length=255)),
                ("ci", models.PositiveSmallIntegerField(blank=True, editable=False, null=True)),
                ("urgency", models.CharField(blank=True, editable=False, max_length=1)),
                ("cost", models.DecimalField(blank=True, decimal_places=2, editable=False, max_digits=14, null=True)),
                (
                    "inspection",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="component_scores",
                        to="tams.inspection",
                    ),
                ),
            ],
            options={"ordering": ["inspection_id", "id"]},
        ),
    ]
