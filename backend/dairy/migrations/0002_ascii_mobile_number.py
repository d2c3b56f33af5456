import django.core.validators
from django.db import migrations, models


MOBILE_NUMBER_VALIDATOR = django.core.validators.RegexValidator(
    message="Mobile number must be 10 digits",
    regex="^[0-9]{10}$",
)


class Migration(migrations.Migration):

    dependencies = [
        ("dairy", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="buyer",
            name="mobile_number",
            field=models.CharField(max_length=10, validators=[MOBILE_NUMBER_VALIDATOR]),
        ),
        migrations.AlterField(
            model_name="seller",
            name="mobile_number",
            field=models.CharField(max_length=10, validators=[MOBILE_NUMBER_VALIDATOR]),
        ),
    ]
