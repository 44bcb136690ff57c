from django.db import migrations, models


def fill_email_key(apps, schema_editor):
    Customer = apps.get_model("customers", "Customer")
    for customer in Customer.objects.all().only("id", "email"):
        Customer.objects.filter(pk=customer.pk).update(email_key=customer.email.casefold())


class Migration(migrations.Migration):

    dependencies = [
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="customer",
            name="email_key",
            field=models.CharField(default="", editable=False, max_length=512),
            preserve_default=False,
        ),
        migrations.RunPython(fill_email_key, migrations.RunPython.noop),
        migrations.RemoveConstraint(
            model_name="customer",
            name="customers_email_ci_unique",
        ),
        migrations.AddConstraint(
            model_name="customer",
            constraint=models.UniqueConstraint(
                fields=["email_key"],
                name="customers_email_key_unique",
            ),
        ),
    ]
