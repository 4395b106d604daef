"""
Initial migration for budgets app.
"""
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('tenant', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MonthlyBudget',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('budget_month', models.DateField(help_text='First day of the budgeted month')),
                ('target_amount', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('description', models.TextField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('store', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='monthly_budgets', to='tenant.store')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='monthly_budgets', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Monthly Budget',
                'verbose_name_plural': 'Monthly Budgets',
                'ordering': ['-budget_month'],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'store', 'budget_month'), name='unique_budget_per_month'),
                    models.UniqueConstraint(condition=models.Q(('store__isnull', True)), fields=('tenant', 'budget_month'), name='unique_budget_per_month_no_store'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DailyTarget',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('target_date', models.DateField()),
                ('target_amount', models.PositiveIntegerField(default=0)),
                ('note', models.CharField(blank=True, max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('monthly_budget', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_targets', to='budgets.monthlybudget')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daily_targets', to='tenant.tenant')),
            ],
            options={
                'verbose_name': 'Daily Target',
                'verbose_name_plural': 'Daily Targets',
                'ordering': ['target_date'],
                'constraints': [
                    models.UniqueConstraint(fields=('monthly_budget', 'target_date'), name='unique_daily_target_per_budget'),
                ],
            },
        ),
    ]
