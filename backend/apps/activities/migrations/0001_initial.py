import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("leads", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Activity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("type", models.CharField(
                    choices=[
                        ("call", "Call"),
                        ("email", "Email"),
                        ("note", "Note"),
                        ("task", "Task"),
                        ("meeting", "Meeting"),
                        ("message", "Message"),
                        ("escalation", "Escalation"),
                    ],
                    db_index=True,
                    default="note",
                    max_length=20,
                )),
                ("status", models.CharField(
                    choices=[
                        ("pending", "Pending"),
                        ("scheduled", "Scheduled"),
                        ("completed", "Completed"),
                        ("cancelled", "Cancelled"),
                        ("overdue", "Overdue"),
                    ],
                    db_index=True,
                    default="pending",
                    max_length=20,
                )),
                ("priority", models.CharField(
                    choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("urgent", "Urgent")],
                    default="medium",
                    max_length=10,
                )),
                ("subject", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("lead", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="activities",
                    to="leads.lead",
                )),
                ("user", models.ForeignKey(
                    blank=True,
                    help_text="Assignee (rep for follow-ups, manager for escalations)",
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="activities",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "verbose_name_plural": "Activities",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["lead", "status"], name="activities__lead_id_5d1c2e_idx"),
                    models.Index(fields=["lead", "type", "created_at"], name="activities__lead_id_a8f0b4_idx"),
                    models.Index(fields=["status", "due_date"], name="activities__status_3c9e71_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Deal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255)),
                ("amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("stage", models.CharField(blank=True, default="open", max_length=50)),
                ("lead", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="deals",
                    to="leads.lead",
                )),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="Quote",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("number", models.CharField(blank=True, default="", max_length=64)),
                ("amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("status", models.CharField(blank=True, default="draft", max_length=20)),
                ("lead", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="quotes",
                    to="leads.lead",
                )),
            ],
            options={"ordering": ["-created_at"]},
        ),
    ]
