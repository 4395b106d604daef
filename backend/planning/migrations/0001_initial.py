"""
Initial migration for planning app.

Creates plans, their product lines and the calendar schedules that carry
the frozen product snapshot and revenue figures.
"""
from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('tenant', '0001_initial'),
        ('catalog', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Plan',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('is_active', models.BooleanField(db_index=True, default=True, help_text='Inactive records are archived and hidden from normal lookups.')),
                ('archived_at', models.DateTimeField(blank=True, null=True)),
                ('name', models.CharField(max_length=100)),
                ('reading', models.CharField(blank=True, max_length=200)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('active', 'Active'), ('completed', 'Completed')], default='draft', max_length=20)),
                ('description', models.TextField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('archived_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='planning_plan_archived', to=settings.AUTH_USER_MODEL)),
                ('category', models.ForeignKey(limit_choices_to={'kind': 'plan'}, on_delete=django.db.models.deletion.PROTECT, related_name='plans', to='catalog.category')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_plans', to=settings.AUTH_USER_MODEL)),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='plans', to='tenant.store')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='plans', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Plan',
                'verbose_name_plural': 'Plans',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['tenant', 'status'], name='plan_tenant_status_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('category', 'store', 'name'), name='unique_plan_name_per_category'),
                    models.UniqueConstraint(condition=models.Q(('store__isnull', True)), fields=('category', 'name'), name='unique_plan_name_per_category_no_store'),
                    models.UniqueConstraint(condition=models.Q(('reading', ''), _negated=True), fields=('category', 'store', 'reading'), name='unique_plan_reading_per_category'),
                    models.UniqueConstraint(condition=models.Q(('store__isnull', True), models.Q(('reading', ''), _negated=True)), fields=('category', 'reading'), name='unique_plan_reading_per_category_no_store'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PlanProduct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('production_count', models.PositiveIntegerField(help_text='How many units of the product the plan makes', validators=[django.core.validators.MinValueValidator(1)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='plan_products', to='planning.plan')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='plan_products', to='catalog.product')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='plan_products', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Plan Product',
                'verbose_name_plural': 'Plan Products',
                'ordering': ['id'],
                'constraints': [
                    models.UniqueConstraint(fields=('plan', 'product'), name='unique_product_per_plan'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PlanSchedule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('scheduled_date', models.DateField()),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='scheduled', max_length=20)),
                ('actual_revenue', models.PositiveIntegerField(blank=True, null=True)),
                ('planned_revenue', models.IntegerField(blank=True, help_text='Planned revenue frozen when the actual revenue was first recorded', null=True)),
                ('plan_products_snapshot', models.JSONField(blank=True, default=dict)),
                ('note', models.TextField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_plan_schedules', to=settings.AUTH_USER_MODEL)),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='schedules', to='planning.plan')),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='plan_schedules', to='tenant.store')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='plan_schedules', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Plan Schedule',
                'verbose_name_plural': 'Plan Schedules',
                'ordering': ['-scheduled_date'],
                'indexes': [models.Index(fields=['tenant', 'scheduled_date'], name='schedule_tenant_date_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('plan', 'scheduled_date'), name='unique_plan_per_date'),
                ],
            },
        ),
    ]
