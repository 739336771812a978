import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tams", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WorkOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("batch_reference", models.CharField(blank=True, db_index=True, max_length=40)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                (
                    "maintenance_type",
                    models.CharField(
                        choices=[
                            ("Inspection", "Inspection"),
                            ("Repair", "Repair"),
                            ("Replacement", "Replacement"),
                            ("Cleaning", "Cleaning"),
                            ("Preventive", "Preventive"),
                            ("Emergency", "Emergency"),
                        ],
                        default="Repair",
                        max_length=20,
                    ),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=[("Low", "Low"), ("Medium", "Medium"), ("High", "High"), ("Critical", "Critical")],
                        default="Medium",
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Scheduled", "Scheduled"),
                            ("In Progress", "In progress"),
                            ("Completed", "Completed"),
                            ("Cancelled", "Cancelled"),
                            ("Overdue", "Overdue"),
                        ],
                        default="Scheduled",
                        max_length=20,
                    ),
                ),
                ("scheduled_date", models.DateField(blank=True, null=True)),
                ("completed_date", models.DateField(blank=True, null=True)),
                ("technician", models.CharField(blank=True, max_length=150)),
                ("estimated_cost", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("actual_cost", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("modified_at", models.DateTimeField(auto_now=True)),
                (
                    "asset",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="work_orders",
                        to="tams.asset",
                    ),
                ),
                (
                    "inspection",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="work_orders",
                        to="tams.inspection",
                    ),
                ),
            ],
            options={"ordering": ["scheduled_date", "id"]},
        ),
    ]
