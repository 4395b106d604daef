"""
Initial migration for tenant app.

Creates Tenant and Store, then the fallback tenant that TenantMiddleware
uses for localhost and testserver requests.
"""
import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


def create_default_tenant(apps, schema_editor):
    Tenant = apps.get_model('tenant', 'Tenant')
    slug = getattr(settings, 'DEFAULT_TENANT_SLUG', 'myrestaurant')
    Tenant.objects.get_or_create(slug=slug, defaults={'name': 'Default Restaurant', 'is_active': True})


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Display name for the company (e.g., Sushi Taro)', max_length=255)),
                ('slug', models.SlugField(help_text='URL-safe identifier used in the subdomain', unique=True)),
                ('contact_email', models.EmailField(blank=True, max_length=254)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive tenants cannot access the system')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tenants',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['slug'], name='tenants_slug_idx'),
                    models.Index(fields=['is_active'], name='tenants_is_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Store',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('code', models.CharField(max_length=20)),
                ('invitation_code', models.CharField(blank=True, help_text='Code staff enter to join this store', max_length=8, null=True, unique=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stores', to='tenant.tenant')),
            ],
            options={
                'db_table': 'stores',
                'ordering': ['code'],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'name'), name='unique_store_name_per_tenant'),
                    models.UniqueConstraint(fields=('tenant', 'code'), name='unique_store_code_per_tenant'),
                ],
            },
        ),
        migrations.RunPython(create_default_tenant, migrations.RunPython.noop),
    ]
