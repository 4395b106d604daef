"""
Tests for the material requirements engine.
"""
import datetime
import math

import pytest
from decimal import Decimal

from catalog.models import Category, CategoryKind, Material, OrderConversionType
from planning.exceptions import InvalidProductionCountError
from planning.models import PlanProduct, PlanSchedule, ScheduleStatus
from planning.services import (
    LEGACY_PLAN_POLICY,
    ORDERING_POLICY,
    PlanService,
    RequirementsAggregator,
    aggregate_plan_requirements,
    calculate_materials_summary,
    calculate_product_requirements,
    calculate_required_order_quantity,
    material_requirements_for_date,
)
from planning.services.requirements_service import PlanLine, RoundingPolicy

SERVICE_DAY = datetime.date(2025, 3, 3)


def by_name(requirements):
    return {r.material_name: r for r in requirements}


@pytest.mark.django_db
class TestCalculateProductRequirements:

    def test_line_totals(self, tamago_nigiri, egg):
        contributions = calculate_product_requirements(tamago_nigiri, 50)

        assert len(contributions) == 1
        contribution = contributions[0]
        assert contribution.material_id == egg.pk
        assert contribution.material_name == 'Egg'
        assert contribution.total_quantity == Decimal('100')
        assert contribution.weight_per_product == Decimal('30')
        assert contribution.total_weight == Decimal('1500')
        assert contribution.unit_name == 'g'

    def test_total_weight_is_count_times_line_weights(self, make_product, egg, nori):
        product = make_product('Tamago Gunkan', materials=[(egg, '1.5', '12'), (nori, 1, '2.5')])

        contributions = calculate_product_requirements(product, 7)

        expected = 7 * (Decimal('1.5') * Decimal('12') + Decimal('1') * Decimal('2.5'))
        assert sum(c.total_weight for c in contributions) == expected

    @pytest.mark.parametrize("production_count", [0, -1, None])
    def test_non_positive_count_rejected(self, tamago_nigiri, production_count):
        with pytest.raises(InvalidProductionCountError):
            calculate_product_requirements(tamago_nigiri, production_count)

    def test_product_without_materials(self, make_product):
        assert calculate_product_requirements(make_product('Tea'), 5) == []


@pytest.mark.django_db
class TestCalculateRequiredOrderQuantity:

    def test_weight_based_rounds_up(self, egg):
        assert calculate_required_order_quantity(Decimal('1500'), Decimal('100'), egg) == 8

    def test_count_based_rounds_up(self, nori):
        assert calculate_required_order_quantity(Decimal('0'), Decimal('250'), nori) == 3

    def test_two_decimals(self, egg):
        result = calculate_required_order_quantity(
            Decimal('1500'), Decimal('100'), egg, RoundingPolicy.TWO_DECIMALS
        )

        assert result == Decimal('7.50')

    def test_unconfigured_is_zero(self, egg):
        egg.measurement_type = ''
        egg.unit_weight_for_order = None
        egg.pieces_per_order_unit = None

        assert egg.order_conversion_type == OrderConversionType.NONE
        assert calculate_required_order_quantity(Decimal('1500'), Decimal('100'), egg) == 0

    def test_zero_divisor_is_zero(self, egg):
        egg.unit_weight_for_order = Decimal('0')

        assert calculate_required_order_quantity(Decimal('1500'), Decimal('100'), egg) == 0

    @pytest.mark.parametrize("total_weight", ['1', '199', '200', '201', '1999.5'])
    def test_never_under_orders(self, egg, total_weight):
        total_weight = Decimal(total_weight)

        result = calculate_required_order_quantity(total_weight, Decimal('0'), egg)

        assert result == math.ceil(total_weight / egg.unit_weight_for_order)
        assert result * egg.unit_weight_for_order >= total_weight


@pytest.mark.django_db
class TestAggregatePlanRequirements:

    def test_tamago_example(self, make_plan, tamago_nigiri):
        plan = make_plan('Lunch', products=[(tamago_nigiri, 50)])

        requirements = aggregate_plan_requirements(plan)

        assert len(requirements) == 1
        egg = requirements[0]
        assert egg.total_quantity == Decimal('100')
        assert egg.total_weight == Decimal('1500')
        assert egg.required_order_quantity == 8
        assert egg.order_conversion_type == OrderConversionType.WEIGHT
        assert egg.order_unit_name == 'パック'
        assert egg.is_grouped is False

    def test_nori_example(self, make_plan, kappa_maki, futomaki):
        plan = make_plan('Rolls', products=[(kappa_maki, 150), (futomaki, 50)])

        requirements = aggregate_plan_requirements(plan)

        assert len(requirements) == 1
        nori = requirements[0]
        assert nori.total_quantity == Decimal('250')
        assert nori.required_order_quantity == 3
        assert nori.order_unit_name == '袋'

    def test_order_group_rounds_pooled_total(self, make_plan, akami_nigiri, toro_nigiri, tuna_case):
        # 600 g + 450 g: one case each on their own, two cases pooled
        plan = make_plan('Tuna Day', products=[(akami_nigiri, 40), (toro_nigiri, 30)])

        requirements = by_name(aggregate_plan_requirements(plan))

        assert requirements['Akami'].total_weight == Decimal('600')
        assert requirements['Toro'].total_weight == Decimal('450')
        for name in ('Akami', 'Toro'):
            assert requirements[name].required_order_quantity == 2
            assert requirements[name].is_grouped is True
            assert requirements[name].order_group_name == 'Tuna case'

    def test_group_total_equals_member_sum(self, make_plan, akami_nigiri, toro_nigiri):
        plan = make_plan('Tuna Day', products=[(akami_nigiri, 40), (toro_nigiri, 30)])

        requirements = aggregate_plan_requirements(plan)

        pooled = sum(r.total_weight for r in requirements)
        assert requirements[0].required_order_quantity == math.ceil(pooled / Decimal('1000'))

    def test_ungrouped_materials_rounded_separately(self, make_plan, tamago_nigiri, kappa_maki):
        plan = make_plan('Mixed', products=[(tamago_nigiri, 10), (kappa_maki, 10)])

        requirements = by_name(aggregate_plan_requirements(plan))

        assert requirements['Egg'].required_order_quantity == 2
        assert requirements['Nori'].required_order_quantity == 1

    def test_unconfigured_material_reported_with_zero(self, make_plan, tamago_nigiri, egg):
        Material.all_objects.filter(pk=egg.pk).update(measurement_type='', unit_weight_for_order=None)
        plan = make_plan('Lunch', products=[(tamago_nigiri, 50)])

        requirements = aggregate_plan_requirements(plan)

        assert requirements[0].required_order_quantity == 0
        assert requirements[0].order_conversion_type == OrderConversionType.NONE
        assert requirements[0].total_weight == Decimal('1500')

    def test_sorted_by_display_order_then_name(self, make_plan, make_material, make_product):
        rice = make_material('Rice', display_order=1)
        wasabi = make_material('Wasabi', display_order=2)
        ginger = make_material('Ginger')
        basil = make_material('Basil')
        product = make_product('Set', materials=[(ginger, 1, 1), (wasabi, 1, 1), (basil, 1, 1), (rice, 1, 1)])
        plan = make_plan('Sets', products=[(product, 1)])

        names = [r.material_name for r in aggregate_plan_requirements(plan)]

        assert names == ['Rice', 'Wasabi', 'Basil', 'Ginger']

    def test_idempotent(self, make_plan, tamago_nigiri, kappa_maki, akami_nigiri, toro_nigiri):
        plan = make_plan('Everything', products=[
            (tamago_nigiri, 12), (kappa_maki, 30), (akami_nigiri, 8), (toro_nigiri, 5),
        ])

        assert aggregate_plan_requirements(plan) == aggregate_plan_requirements(plan)

    def test_empty_plan(self, make_plan):
        assert aggregate_plan_requirements(make_plan('Nothing')) == []


@pytest.mark.django_db
class TestAggregationPolicies:

    @pytest.fixture
    def second_egg(self, tenant, make_material):
        dairy = Category.objects.create(tenant=tenant, name='Dairy', kind=CategoryKind.MATERIAL)
        return make_material('Egg', category=dairy, unit_weight_for_order=Decimal('200'))

    @pytest.fixture
    def egg_plan(self, make_plan, make_product, tamago_nigiri, second_egg):
        egg_roll = make_product('Egg Roll', materials=[(second_egg, 1, 20)])
        return make_plan('Egg Day', products=[(tamago_nigiri, 50), (egg_roll, 10)])

    def test_ordering_policy_keeps_materials_apart(self, egg_plan, egg, second_egg):
        requirements = aggregate_plan_requirements(egg_plan, ORDERING_POLICY)

        assert {r.material_id: r.required_order_quantity for r in requirements} == {
            egg.pk: Decimal('8'),
            second_egg.pk: Decimal('1'),
        }

    def test_legacy_policy_merges_by_name(self, egg_plan, egg):
        requirements = aggregate_plan_requirements(egg_plan, LEGACY_PLAN_POLICY)

        assert len(requirements) == 1
        merged = requirements[0]
        assert merged.material_id == egg.pk
        assert merged.total_weight == Decimal('1700')
        assert merged.required_order_quantity == Decimal('8.50')

    def test_aggregator_accepts_plan_lines(self, tamago_nigiri):
        aggregator = RequirementsAggregator(LEGACY_PLAN_POLICY)

        requirements = aggregator.aggregate([PlanLine(tamago_nigiri, 50)])

        assert requirements[0].required_order_quantity == Decimal('7.50')


@pytest.mark.django_db
class TestMaterialRequirementsForDate:

    def test_merges_plans_by_material(self, make_plan, tamago_nigiri, kappa_maki):
        lunch = make_plan('Lunch', products=[(tamago_nigiri, 50)])
        dinner = make_plan('Dinner', products=[(tamago_nigiri, 20), (kappa_maki, 40)])
        PlanService.add_schedules(lunch, [SERVICE_DAY])
        PlanService.add_schedules(dinner, [SERVICE_DAY])

        requirements = by_name(material_requirements_for_date(SERVICE_DAY))

        egg = requirements['Egg']
        assert egg.total_quantity == Decimal('140')
        assert egg.total_weight == Decimal('2100')
        # Each plan is rounded on its own: 8 packs + 3 packs
        assert egg.required_order_quantity == 11
        assert egg.plans == ['Lunch', 'Dinner']
        assert requirements['Nori'].plans == ['Dinner']

    def test_sorted_by_material_name(self, make_plan, tamago_nigiri, kappa_maki):
        plan = make_plan('Lunch', products=[(kappa_maki, 10), (tamago_nigiri, 10)])
        PlanService.add_schedule(plan, SERVICE_DAY)

        names = [r.material_name for r in material_requirements_for_date(SERVICE_DAY)]

        assert names == ['Egg', 'Nori']

    def test_name_order_ignores_display_order(self, make_plan, tamago_nigiri, kappa_maki, egg, nori):
        Material.all_objects.filter(pk=nori.pk).update(display_order=1)
        Material.all_objects.filter(pk=egg.pk).update(display_order=2)
        plan = make_plan('Lunch', products=[(tamago_nigiri, 10), (kappa_maki, 10)])
        PlanService.add_schedule(plan, SERVICE_DAY)

        plan_names = [r.material_name for r in aggregate_plan_requirements(plan)]
        daily_names = [r.material_name for r in material_requirements_for_date(SERVICE_DAY)]

        assert plan_names == ['Nori', 'Egg']
        assert daily_names == ['Egg', 'Nori']

    def test_cancelled_schedules_skipped(self, make_plan, tamago_nigiri):
        plan = make_plan('Lunch', products=[(tamago_nigiri, 50)])
        schedule, _ = PlanService.add_schedule(plan, SERVICE_DAY)
        schedule.status = ScheduleStatus.CANCELLED
        schedule.save()

        assert material_requirements_for_date(SERVICE_DAY) == []

    def test_other_days_ignored(self, make_plan, tamago_nigiri):
        plan = make_plan('Lunch', products=[(tamago_nigiri, 50)])
        PlanService.add_schedule(plan, SERVICE_DAY + datetime.timedelta(days=1))

        assert material_requirements_for_date(SERVICE_DAY) == []

    def test_snapshot_preferred_over_live_plan(self, make_plan, tamago_nigiri):
        plan = make_plan('Lunch', products=[(tamago_nigiri, 50)])
        PlanService.add_schedule(plan, SERVICE_DAY)
        PlanProduct.objects.filter(plan=plan).update(production_count=10)

        requirements = material_requirements_for_date(SERVICE_DAY)

        assert requirements[0].total_quantity == Decimal('100')

    def test_live_plan_used_without_snapshot(self, make_plan, tamago_nigiri, tenant):
        plan = make_plan('Lunch', products=[(tamago_nigiri, 50)])
        PlanSchedule.objects.create(tenant=tenant, plan=plan, scheduled_date=SERVICE_DAY)
        PlanProduct.objects.filter(plan=plan).update(production_count=10)

        requirements = material_requirements_for_date(SERVICE_DAY)

        assert requirements[0].total_quantity == Decimal('20')

    def test_store_filter(self, tenant, make_plan, tamago_nigiri, kappa_maki, store):
        main = make_plan('Main Lunch', products=[(tamago_nigiri, 50)], store=store)
        other = make_plan('Other Lunch', products=[(kappa_maki, 50)])
        PlanService.add_schedule(main, SERVICE_DAY)
        PlanService.add_schedule(other, SERVICE_DAY)

        requirements = material_requirements_for_date(SERVICE_DAY, store=store)

        assert [r.material_name for r in requirements] == ['Egg']

    def test_other_tenant_schedules_invisible(self, make_plan, tamago_nigiri, other_tenant):
        from tenant.managers import tenant_context

        plan = make_plan('Lunch', products=[(tamago_nigiri, 50)])
        PlanService.add_schedule(plan, SERVICE_DAY)

        with tenant_context(other_tenant):
            assert material_requirements_for_date(SERVICE_DAY) == []


@pytest.mark.django_db
class TestCalculateMaterialsSummary:

    def test_breakdown_by_product(self, make_plan, tamago_nigiri, make_product, egg, nori):
        gunkan = make_product('Tamago Gunkan', materials=[(egg, 1, 15), (nori, 1, 3)])
        plan = make_plan('Lunch', products=[(tamago_nigiri, 50), (gunkan, 20)])

        summaries = {s.material_name: s for s in calculate_materials_summary(plan)}

        egg_summary = summaries['Egg']
        assert egg_summary.total_quantity == Decimal('120')
        assert [(p.product_name, p.quantity) for p in egg_summary.products] == [
            ('Tamago Nigiri', Decimal('100')),
            ('Tamago Gunkan', Decimal('20')),
        ]
        # Weight comes from the material's default of 15 g per unit
        assert egg_summary.total_weight == Decimal('1800')
        assert egg_summary.weight_per_product == Decimal('15')
        assert egg_summary.required_order_quantity == 9

        nori_summary = summaries['Nori']
        assert nori_summary.total_weight == 0
        assert nori_summary.required_order_quantity == 1

    def test_sorted_by_display_order_then_id(self, make_plan, make_product, make_material):
        first = make_material('Zucchini')
        second = make_material('Avocado')
        third = make_material('Cucumber', display_order=1)
        product = make_product('Veggie Roll', materials=[(second, 1, 1), (first, 1, 1), (third, 1, 1)])
        plan = make_plan('Veggie', products=[(product, 1)])

        names = [s.material_name for s in calculate_materials_summary(plan)]

        assert names == ['Cucumber', 'Zucchini', 'Avocado']
