import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Lead",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("first_name", models.CharField(blank=True, default="", max_length=120)),
                ("last_name", models.CharField(blank=True, default="", max_length=120)),
                ("email", models.EmailField(blank=True, max_length=254, null=True)),
                ("phone", models.CharField(blank=True, max_length=40, null=True)),
                ("email_key", models.CharField(blank=True, default="", editable=False, max_length=254)),
                ("phone_key", models.CharField(blank=True, default="", editable=False, max_length=20)),
                ("name_key", models.CharField(blank=True, default="", editable=False, max_length=240)),
                ("status", models.CharField(
                    choices=[
                        ("new", "New"),
                        ("contacted", "Contacted"),
                        ("qualified", "Qualified"),
                        ("applied", "Applied"),
                        ("approved", "Approved"),
                        ("won", "Won"),
                        ("dead", "Dead"),
                    ],
                    db_index=True,
                    default="new",
                    max_length=20,
                )),
                ("last_activity_at", models.DateTimeField(blank=True, null=True)),
                ("last_contacted_at", models.DateTimeField(
                    blank=True,
                    help_text="Set once, when the first contact activity is recorded",
                    null=True,
                )),
                ("lead_score", models.PositiveIntegerField(default=0)),
                ("notes", models.TextField(blank=True, default="")),
                ("manager_notes", models.TextField(blank=True, default="")),
                ("rep_notes", models.TextField(blank=True, default="")),
                ("tags", models.JSONField(blank=True, default=list)),
                ("assigned_to_name", models.CharField(blank=True, default="", max_length=255)),
                ("sales_rep_name", models.CharField(blank=True, default="", max_length=255)),
                ("assigned_to", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="assigned_leads",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["email_key"], name="leads_lead_email_k_6c2f1e_idx"),
                    models.Index(fields=["phone_key"], name="leads_lead_phone_k_9a41d3_idx"),
                    models.Index(fields=["name_key"], name="leads_lead_name_ke_2b7c80_idx"),
                    models.Index(fields=["status", "last_activity_at"], name="leads_lead_status_4e0d5a_idx"),
                    models.Index(fields=["last_contacted_at", "created_at"], name="leads_lead_last_co_81b3f2_idx"),
                ],
            },
        ),
    ]
