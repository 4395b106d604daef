"""
Initial migration for catalog app.

Creates categories, material order groups, materials, products and the
product material lines (bill of materials).
"""
from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


def soft_delete_fields(app_label, model_name):
    return [
        ('is_active', models.BooleanField(db_index=True, default=True, help_text='Inactive records are archived and hidden from normal lookups.')),
        ('archived_at', models.DateTimeField(blank=True, null=True)),
        ('archived_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name=f'{app_label}_{model_name}_archived', to=settings.AUTH_USER_MODEL)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('tenant', '0001_initial'),
        ('measurements', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('reading', models.CharField(blank=True, max_length=200)),
                ('kind', models.CharField(choices=[('material', 'Material'), ('product', 'Product'), ('plan', 'Plan')], max_length=20)),
                ('description', models.TextField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='categories', to='tenant.store')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='categories', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['kind', 'name'],
                'indexes': [models.Index(fields=['tenant', 'kind'], name='category_tenant_kind_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'kind', 'name'), name='unique_category_name_per_kind'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MaterialOrderGroup',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('reading', models.CharField(blank=True, max_length=200)),
                ('description', models.TextField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='material_order_groups', to='tenant.store')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='material_order_groups', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Material Order Group',
                'verbose_name_plural': 'Material Order Groups',
                'ordering': ['name'],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'name'), name='unique_order_group_name_per_tenant'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Material',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *soft_delete_fields('catalog', 'material'),
                ('name', models.CharField(max_length=100)),
                ('reading', models.CharField(blank=True, max_length=200)),
                ('measurement_type', models.CharField(choices=[('weight', 'Weight based'), ('count', 'Count based')], default='weight', max_length=10)),
                ('default_unit_weight', models.DecimalField(blank=True, decimal_places=2, help_text='Grams per product unit, copied onto new product lines', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('unit_weight_for_order', models.DecimalField(blank=True, decimal_places=2, help_text='Grams per order unit (weight based)', max_digits=10, null=True)),
                ('pieces_per_order_unit', models.PositiveIntegerField(blank=True, help_text='Pieces per order unit (count based)', null=True)),
                ('display_order', models.PositiveIntegerField(blank=True, null=True)),
                ('description', models.TextField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(limit_choices_to={'kind': 'material'}, on_delete=django.db.models.deletion.PROTECT, related_name='materials', to='catalog.category')),
                ('order_group', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='materials', to='catalog.materialordergroup')),
                ('production_unit', models.ForeignKey(blank=True, help_text='Unit the kitchen counts this material in', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='production_materials', to='measurements.unit')),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='materials', to='tenant.store')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='materials', to='tenant.tenant')),
                ('unit_for_order', models.ForeignKey(help_text='Unit the supplier sells in', on_delete=django.db.models.deletion.PROTECT, related_name='order_materials', to='measurements.unit')),
                ('unit_for_product', models.ForeignKey(help_text='Unit the per-product quantity is entered in', on_delete=django.db.models.deletion.PROTECT, related_name='product_materials_unit', to='measurements.unit')),
            ],
            options={
                'verbose_name': 'Material',
                'verbose_name_plural': 'Materials',
                'ordering': ['display_order', 'name'],
                'indexes': [
                    models.Index(fields=['tenant', 'is_active'], name='material_tenant_active_idx'),
                    models.Index(fields=['tenant', 'order_group'], name='material_tenant_group_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('category', 'name'), name='unique_material_name_per_category'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *soft_delete_fields('catalog', 'product'),
                ('name', models.CharField(max_length=100)),
                ('reading', models.CharField(blank=True, max_length=200)),
                ('item_number', models.CharField(help_text='Four digit item number, unique within the category', max_length=4, validators=[django.core.validators.RegexValidator('^\\d{4}$', 'Item numbers are four digits.')])),
                ('price', models.PositiveIntegerField(help_text='Selling price in yen', validators=[django.core.validators.MinValueValidator(1)])),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('selling', 'Selling'), ('discontinued', 'Discontinued')], default='draft', max_length=20)),
                ('display_order', models.PositiveIntegerField(blank=True, null=True)),
                ('description', models.TextField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(limit_choices_to={'kind': 'product'}, on_delete=django.db.models.deletion.PROTECT, related_name='products', to='catalog.category')),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='products', to='tenant.store')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['display_order', 'name'],
                'indexes': [models.Index(fields=['tenant', 'status'], name='product_tenant_status_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('category', 'name'), name='unique_product_name_per_category'),
                    models.UniqueConstraint(fields=('category', 'item_number'), name='unique_product_item_number_per_category'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProductMaterial',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=2, help_text='Units of material consumed per product', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('unit_weight', models.DecimalField(decimal_places=2, help_text='Grams per unit at the time the line was created', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('material', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='product_materials', to='catalog.material')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_materials', to='catalog.product')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_materials', to='tenant.tenant')),
                ('unit', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='product_material_lines', to='measurements.unit')),
            ],
            options={
                'verbose_name': 'Product Material',
                'verbose_name_plural': 'Product Materials',
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'material'), name='unique_material_per_product'),
                ],
            },
        ),
    ]
