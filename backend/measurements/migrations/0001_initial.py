"""
Initial migration for measurements app.

Creates the tenant-scoped Unit model and seeds the default units for
tenants that already exist (new tenants are seeded by a post_save signal).
"""
from django.db import migrations, models
import django.db.models.deletion


def seed_default_units(apps, schema_editor):
    """
    Seed the default units for every existing tenant.
    """
    from measurements.services.seeding import DEFAULT_UNITS

    Tenant = apps.get_model('tenant', 'Tenant')
    Unit = apps.get_model('measurements', 'Unit')

    for tenant in Tenant.objects.all():
        for unit_data in DEFAULT_UNITS:
            Unit.objects.get_or_create(
                tenant=tenant,
                store=None,
                category=unit_data["category"],
                name=unit_data["name"],
                defaults={"reading": unit_data["reading"]},
            )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenant', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Unit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Unit label, e.g. 'g', 'kg', '箱', '枚'", max_length=50)),
                ('reading', models.CharField(blank=True, help_text='Hiragana reading used for sorting and search', max_length=100)),
                ('category', models.CharField(choices=[('production', 'Production'), ('ordering', 'Ordering'), ('manufacturing', 'Manufacturing')], max_length=20)),
                ('description', models.TextField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='units', to='tenant.store')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='units', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Unit',
                'verbose_name_plural': 'Units',
                'ordering': ['category', 'name'],
                'indexes': [models.Index(fields=['tenant', 'category'], name='unit_tenant_category_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'store', 'category', 'name'), name='unique_unit_name_per_category'),
                ],
            },
        ),
        migrations.RunPython(seed_default_units, migrations.RunPython.noop),
    ]
