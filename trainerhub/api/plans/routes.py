"""
Routes for the plan catalog.
"""
from http import HTTPStatus

from flask import request
from flask_jwt_extended import get_jwt_identity, jwt_required
from flask_restx import Resource, fields

from trainerhub.models import PlanType, SubscriptionStatus
from trainerhub.services.catalog import SORT_OPTIONS, PlanCatalog
from trainerhub.utils.auth import admin_required
from trainerhub.utils.responses import domain_errors, json_body, parse_bool_arg

from . import plan_ns

catalog = PlanCatalog()

# Define the plan model for API
plan_model = plan_ns.model('Plan', {
    'id': fields.Integer(description='Plan ID'),
    'name': fields.String(required=True, description='Plan name'),
    'description': fields.String(description='Plan description'),
    'plan_type': fields.String(description='Plan type', enum=[t.value for t in PlanType]),
    'monthly_price': fields.Float(required=True, description='Monthly price'),
    'annual_price': fields.Float(description='Annual price'),
    'max_students': fields.Integer(description='Student limit, 0 means unlimited'),
    'features': fields.List(fields.String, description='Ordered feature labels'),
    'active': fields.Boolean(description='Whether the plan can be assigned'),
    'visible_on_landing': fields.Boolean(description='Whether the plan is shown publicly'),
    'display_order': fields.Integer(description='Display order'),
    'created_at': fields.DateTime(description='Creation date'),
    'updated_at': fields.DateTime(description='Last update date'),
})

plan_list_model = plan_ns.model('PlanList', {
    'plans': fields.List(fields.Nested(plan_model)),
    'total': fields.Integer(description='Number of plans returned'),
})

# Input model for creating/updating plans
plan_input_model = plan_ns.model('PlanInput', {
    'name': fields.String(required=True, description='Plan name'),
    'description': fields.String(description='Plan description'),
    'plan_type': fields.String(description='Plan type', enum=[t.value for t in PlanType],
                               default=PlanType.PUBLIC.value),
    'monthly_price': fields.Float(required=True, description='Monthly price, 0 for lifetime plans'),
    'annual_price': fields.Float(description='Annual price, at most 12 x monthly price'),
    'max_students': fields.Integer(description='Student limit, 0 means unlimited', default=0),
    'features': fields.List(fields.String, description='Ordered feature labels'),
    'active': fields.Boolean(description='Whether the plan can be assigned', default=True),
    'visible_on_landing': fields.Boolean(description='Show on the landing page', default=False),
    'display_order': fields.Integer(description='Display order, defaults to the end'),
})

plan_status_input_model = plan_ns.model('PlanStatusInput', {
    'active': fields.Boolean(required=True, description='New active flag'),
})

plan_order_input_model = plan_ns.model('PlanOrderInput', {
    'new_order': fields.Integer(required=True, description='Target position, clamped to the list'),
})

trainer_count_model = plan_ns.model('PlanTrainerCount', {
    'plan_id': fields.Integer(description='Plan ID'),
    'count': fields.Integer(description='Trainers currently on the plan'),
})

plan_trainer_model = plan_ns.model('PlanTrainer', {
    'id': fields.Integer(description='Trainer ID'),
    'name': fields.String(description='Trainer name'),
    'email': fields.String(description='Trainer email'),
    'period': fields.String(description='Billing period'),
    'subscription_status': fields.String(description='Subscription status',
                                         enum=[s.value for s in SubscriptionStatus]),
    'due_date': fields.Date(description='Due date'),
})


@plan_ns.route('/')
class PlanList(Resource):
    """Resource for listing and creating plans"""

    @plan_ns.doc('list_plans', params={
        'active': {'type': 'boolean', 'description': 'Filter by active flag'},
        'visible_on_landing': {'type': 'boolean', 'description': 'Filter by landing visibility'},
        'plan_type': {'type': 'string', 'description': 'Filter by plan type (public, lifetime)'},
        'sort_by': {'type': 'string', 'default': 'display_order',
                    'description': f"One of {', '.join(sorted(SORT_OPTIONS))}"},
    })
    @plan_ns.response(200, 'Success', plan_list_model)
    @jwt_required()
    @admin_required()
    @domain_errors
    def get(self):
        """List plans (admin only)"""
        plans = catalog.list(
            active=parse_bool_arg(request.args.get('active'), 'active'),
            visible_on_landing=parse_bool_arg(request.args.get('visible_on_landing'), 'visible_on_landing'),
            plan_type=request.args.get('plan_type'),
            sort_by=request.args.get('sort_by', 'display_order'),
        )
        return plan_ns.marshal({'plans': plans, 'total': len(plans)}, plan_list_model)

    @plan_ns.doc('create_plan')
    @plan_ns.expect(plan_input_model)
    @plan_ns.response(201, 'Plan created', plan_model)
    @plan_ns.response(400, 'Validation failed')
    @jwt_required()
    @admin_required()
    @domain_errors
    def post(self):
        """Create a new plan (admin only)"""
        plan = catalog.create(get_jwt_identity(), json_body())
        return plan_ns.marshal(plan, plan_model), HTTPStatus.CREATED


@plan_ns.route('/landing')
class LandingPlans(Resource):
    """Resource for the public landing page"""

    @plan_ns.doc('landing_plans', security=None)
    @plan_ns.marshal_list_with(plan_model)
    def get(self):
        """List active plans shown on the landing page"""
        return catalog.landing_plans()


@plan_ns.route('/<int:plan_id>')
@plan_ns.param('plan_id', 'The plan identifier')
class PlanResource(Resource):
    """Resource for individual plan operations"""

    @plan_ns.doc('get_plan')
    @plan_ns.response(200, 'Success', plan_model)
    @plan_ns.response(404, 'Plan not found')
    @jwt_required()
    @admin_required()
    @domain_errors
    def get(self, plan_id):
        """Get a specific plan (admin only)"""
        return plan_ns.marshal(catalog.get(plan_id), plan_model)

    @plan_ns.doc('update_plan')
    @plan_ns.expect(plan_input_model)
    @plan_ns.response(200, 'Plan updated', plan_model)
    @plan_ns.response(409, 'Type change blocked')
    @jwt_required()
    @admin_required()
    @domain_errors
    def put(self, plan_id):
        """Update a plan (admin only)"""
        plan = catalog.update(get_jwt_identity(), plan_id, json_body())
        return plan_ns.marshal(plan, plan_model)

    @plan_ns.doc('delete_plan')
    @plan_ns.response(204, 'Plan deleted')
    @plan_ns.response(409, 'Plan in use')
    @jwt_required()
    @admin_required()
    @domain_errors
    def delete(self, plan_id):
        """Delete a plan nobody is on (admin only)"""
        catalog.delete(get_jwt_identity(), plan_id)
        return '', HTTPStatus.NO_CONTENT


@plan_ns.route('/<int:plan_id>/status')
@plan_ns.param('plan_id', 'The plan identifier')
class PlanStatusResource(Resource):
    """Resource for activating and deactivating plans"""

    @plan_ns.doc('toggle_plan_status')
    @plan_ns.expect(plan_status_input_model)
    @plan_ns.response(200, 'Status changed', plan_model)
    @plan_ns.response(409, 'Plan has actively subscribed trainers')
    @jwt_required()
    @admin_required()
    @domain_errors
    def post(self, plan_id):
        """Activate or deactivate a plan (admin only)"""
        data = json_body()
        plan = catalog.set_active(get_jwt_identity(), plan_id, data.get('active'))
        return plan_ns.marshal(plan, plan_model)


@plan_ns.route('/<int:plan_id>/duplicate')
@plan_ns.param('plan_id', 'The plan identifier')
class PlanDuplicate(Resource):
    """Resource for copying plans"""

    @plan_ns.doc('duplicate_plan')
    @plan_ns.response(201, 'Plan duplicated', plan_model)
    @jwt_required()
    @admin_required()
    @domain_errors
    def post(self, plan_id):
        """Duplicate a plan (admin only)"""
        copy = catalog.duplicate(get_jwt_identity(), plan_id)
        return plan_ns.marshal(copy, plan_model), HTTPStatus.CREATED


@plan_ns.route('/<int:plan_id>/order')
@plan_ns.param('plan_id', 'The plan identifier')
class PlanOrder(Resource):
    """Resource for moving a plan in the display order"""

    @plan_ns.doc('reorder_plan')
    @plan_ns.expect(plan_order_input_model)
    @plan_ns.response(200, 'Plans in their new order', plan_list_model)
    @jwt_required()
    @admin_required()
    @domain_errors
    def post(self, plan_id):
        """Move a plan to a new display position (admin only)"""
        data = json_body()
        plans = catalog.reorder(get_jwt_identity(), plan_id, data.get('new_order'))
        return plan_ns.marshal({'plans': plans, 'total': len(plans)}, plan_list_model)


@plan_ns.route('/<int:plan_id>/trainers/count')
@plan_ns.param('plan_id', 'The plan identifier')
class PlanTrainerCount(Resource):
    """Resource for counting trainers on a plan"""

    @plan_ns.doc('count_trainers_with_plan')
    @plan_ns.response(200, 'Success', trainer_count_model)
    @jwt_required()
    @admin_required()
    @domain_errors
    def get(self, plan_id):
        """Count trainers currently on a plan (admin only)"""
        count = catalog.count_trainers_on_plan(plan_id)
        return plan_ns.marshal({'plan_id': plan_id, 'count': count}, trainer_count_model)


@plan_ns.route('/<int:plan_id>/trainers')
@plan_ns.param('plan_id', 'The plan identifier')
class PlanTrainers(Resource):
    """Resource for listing trainers on a plan"""

    @plan_ns.doc('list_trainers_with_plan')
    @plan_ns.response(200, 'Success', [plan_trainer_model])
    @jwt_required()
    @admin_required()
    @domain_errors
    def get(self, plan_id):
        """List trainers currently on a plan (admin only)"""
        return plan_ns.marshal(catalog.trainers_on_plan(plan_id), plan_trainer_model)
