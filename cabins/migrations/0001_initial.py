import cabins.models.core
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Location name (e.g., 'Centro')", max_length=200)),
                ('code', models.SlugField(help_text="URL-friendly code (e.g., 'centro')", unique=True)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(blank=True, max_length=50)),
                ('zip_code', models.CharField(blank=True, max_length=20)),
                ('cabins_count', models.PositiveIntegerField(default=0, help_text='Number of cabins (kept in sync by signals)')),
                ('is_active', models.BooleanField(default=True, help_text='Whether this location is listed')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Location',
                'verbose_name_plural': 'Locations',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Cabin',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Display name (e.g., 'Cabin 1')", max_length=100)),
                ('description', models.TextField(blank=True)),
                ('equipment', models.JSONField(blank=True, default=list, help_text='List of equipment available in the cabin')),
                ('base_availability', models.JSONField(default=cabins.models.core.default_base_availability, help_text='Shifts open by default, e.g. {"morning": true, "afternoon": true, "evening": false}')),
                ('default_pricing', models.JSONField(default=cabins.models.core.default_weekday_pricing, help_text='Prices by weekday (Sunday = 0) and shift, e.g. {"0": {"morning": 150, ...}}')),
                ('price', models.DecimalField(blank=True, decimal_places=2, help_text='Flat price used when the weekday table has no price', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('location', models.ForeignKey(help_text='Location this cabin belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='cabins', to='cabins.location')),
            ],
            options={
                'verbose_name': 'Cabin',
                'verbose_name_plural': 'Cabins',
                'ordering': ['location', 'sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='CabinDateOverride',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('shift', models.CharField(choices=[('morning', 'Morning'), ('afternoon', 'Afternoon'), ('evening', 'Evening')], max_length=10)),
                ('price', models.DecimalField(blank=True, decimal_places=2, help_text='Override price (blank = use weekday price)', max_digits=10, null=True)),
                ('available', models.BooleanField(blank=True, help_text='False closes the shift on this date', null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cabin', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='date_overrides', to='cabins.cabin')),
            ],
            options={
                'verbose_name': 'Cabin Date Override',
                'verbose_name_plural': 'Cabin Date Overrides',
                'ordering': ['cabin', 'date', 'shift'],
                'unique_together': {('cabin', 'date', 'shift')},
            },
        ),
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('professional_name', models.CharField(blank=True, max_length=200)),
                ('date', models.DateField()),
                ('shift', models.CharField(choices=[('morning', 'Morning'), ('afternoon', 'Afternoon'), ('evening', 'Evening')], max_length=10)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('cancelled', 'Cancelled')], default='confirmed', max_length=20)),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Price charged for the shift', max_digits=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cabin', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bookings', to='cabins.cabin')),
            ],
            options={
                'verbose_name': 'Booking',
                'verbose_name_plural': 'Bookings',
                'ordering': ['date', 'shift'],
                'indexes': [models.Index(fields=['cabin', 'date'], name='booking_cabin_date_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status', 'confirmed')), fields=('cabin', 'date', 'shift'), name='unique_confirmed_booking_per_slot')],
            },
        ),
    ]
