"""
Routes for trainer subscriptions.
"""
from datetime import date

from flask import current_app, request
from flask_jwt_extended import get_jwt_identity, jwt_required
from flask_restx import Resource, fields

from trainerhub.models import BillingPeriod, SubscriptionStatus
from trainerhub.services.assignment import PlanAssignmentService
from trainerhub.services.errors import ValidationFailed
from trainerhub.utils.auth import admin_required
from trainerhub.utils.responses import domain_errors, json_body

from . import subscription_ns

service = PlanAssignmentService()

# Define the subscription model for API
subscription_model = subscription_ns.model('Subscription', {
    'trainer_id': fields.Integer(description='Trainer ID'),
    'plan_id': fields.Integer(description='Plan ID'),
    'period': fields.String(description='Billing period', enum=[p.value for p in BillingPeriod]),
    'discount_percent': fields.Float(description='Discount percentage'),
    'start_date': fields.Date(description='Start of the current period'),
    'due_date': fields.Date(description='End of the current period'),
    'status': fields.String(description='Subscription status',
                            enum=[s.value for s in SubscriptionStatus]),
    'cancellation_reason': fields.String(description='Reason of the last cancellation'),
})

subscription_envelope_model = subscription_ns.model('SubscriptionEnvelope', {
    'success': fields.Boolean(description='Whether the operation succeeded'),
    'subscription': fields.Nested(subscription_model),
})

history_entry_model = subscription_ns.model('SubscriptionHistoryEntry', {
    'id': fields.Integer(description='Entry ID'),
    'trainer_id': fields.Integer(description='Trainer ID'),
    'plan_id': fields.Integer(description='Plan ID at the time'),
    'plan_name': fields.String(description='Plan name at the time'),
    'period': fields.String(description='Billing period'),
    'discount_percent': fields.Float(description='Discount percentage'),
    'start_date': fields.Date(description='Start date'),
    'due_date': fields.Date(description='Due date'),
    'status': fields.String(description='Status'),
    'final_monthly_price': fields.Float(description='Final monthly price'),
    'final_annual_price': fields.Float(description='Final annual price'),
    'cancellation_reason': fields.String(description='Cancellation reason'),
    'recorded_at': fields.DateTime(description='When the entry was recorded'),
})

history_model = subscription_ns.model('SubscriptionHistory', {
    'success': fields.Boolean(description='Whether the operation succeeded'),
    'history': fields.List(fields.Nested(history_entry_model)),
})

expiring_model = subscription_ns.model('ExpiringSubscriptions', {
    'success': fields.Boolean(description='Whether the operation succeeded'),
    'days': fields.Integer(description='Look-ahead window in days'),
    'subscriptions': fields.List(fields.Nested(subscription_model)),
})

# Input model for assigning a plan
assign_input_model = subscription_ns.model('AssignPlanInput', {
    'plan_id': fields.Integer(required=True, description='Plan to assign'),
    'period': fields.String(description='Billing period (monthly, annual); ignored for lifetime plans',
                            enum=[p.value for p in BillingPeriod], default=BillingPeriod.MONTHLY.value),
    'discount_percent': fields.Float(description='Discount between 0 and 100', default=0),
    'start_date': fields.Date(description='Start date, defaults to today'),
})

# Input model for canceling a plan
cancel_input_model = subscription_ns.model('CancelPlanInput', {
    'reason': fields.String(description='Cancellation reason'),
    'cancel_immediately': fields.Boolean(description='End access today instead of at the due date',
                                         default=False),
})


def _subscription_payload(subscription):
    return subscription_ns.marshal(
        {'success': True, 'subscription': subscription.to_dict()}, subscription_envelope_model
    )


@subscription_ns.route('/trainers/<int:trainer_id>')
@subscription_ns.param('trainer_id', 'The trainer identifier')
class TrainerSubscription(Resource):
    """Resource for a trainer's current subscription"""

    @subscription_ns.doc('get_subscription')
    @subscription_ns.response(200, 'Success', subscription_envelope_model)
    @subscription_ns.response(404, 'Trainer not found')
    @jwt_required()
    @admin_required()
    @domain_errors
    def get(self, trainer_id):
        """Get a trainer's current subscription (admin only)"""
        return _subscription_payload(service.get_current_subscription(get_jwt_identity(), trainer_id))


@subscription_ns.route('/trainers/<int:trainer_id>/assign')
@subscription_ns.param('trainer_id', 'The trainer identifier')
class AssignPlan(Resource):
    """Resource for assigning a plan to a trainer"""

    @subscription_ns.doc('assign_plan')
    @subscription_ns.expect(assign_input_model)
    @subscription_ns.response(200, 'Plan assigned', subscription_envelope_model)
    @subscription_ns.response(400, 'Invalid input or period not valid for plan')
    @subscription_ns.response(404, 'Trainer or plan not found, or plan inactive')
    @subscription_ns.response(409, 'Concurrent update')
    @jwt_required()
    @admin_required()
    @domain_errors
    def post(self, trainer_id):
        """Assign a plan to a trainer (admin only)"""
        data = json_body()
        subscription = service.assign_plan(
            get_jwt_identity(),
            trainer_id,
            data.get('plan_id'),
            data.get('period', BillingPeriod.MONTHLY.value),
            data.get('discount_percent', 0),
            data.get('start_date') or date.today(),
        )
        return _subscription_payload(subscription)


@subscription_ns.route('/trainers/<int:trainer_id>/cancel')
@subscription_ns.param('trainer_id', 'The trainer identifier')
class CancelPlan(Resource):
    """Resource for canceling a trainer's subscription"""

    @subscription_ns.doc('cancel_plan')
    @subscription_ns.expect(cancel_input_model)
    @subscription_ns.response(200, 'Subscription canceled', subscription_envelope_model)
    @subscription_ns.response(404, 'Trainer not found or nothing to cancel')
    @jwt_required()
    @admin_required()
    @domain_errors
    def post(self, trainer_id):
        """Cancel a trainer's subscription (admin only)"""
        data = json_body()
        subscription = service.cancel_plan(
            get_jwt_identity(),
            trainer_id,
            reason=data.get('reason'),
            immediate=data.get('cancel_immediately', False),
        )
        return _subscription_payload(subscription)


@subscription_ns.route('/trainers/<int:trainer_id>/history')
@subscription_ns.param('trainer_id', 'The trainer identifier')
class PlanHistory(Resource):
    """Resource for a trainer's subscription history"""

    @subscription_ns.doc('get_plan_history')
    @subscription_ns.response(200, 'Success', history_model)
    @subscription_ns.response(404, 'Trainer not found')
    @jwt_required()
    @admin_required()
    @domain_errors
    def get(self, trainer_id):
        """List a trainer's subscription history, most recent first (admin only)"""
        history = service.get_plan_history(get_jwt_identity(), trainer_id)
        return subscription_ns.marshal({'success': True, 'history': history}, history_model)


@subscription_ns.route('/expiring')
class ExpiringSubscriptions(Resource):
    """Resource for subscriptions about to reach their due date"""

    @subscription_ns.doc('expiring_subscriptions', params={
        'days': {'type': 'integer', 'description': 'Look-ahead window in days'},
    })
    @subscription_ns.response(200, 'Success', expiring_model)
    @jwt_required()
    @admin_required()
    @domain_errors
    def get(self):
        """List active subscriptions due within the window (admin only)"""
        days = request.args.get('days')
        if days is not None:
            try:
                days = int(days)
            except ValueError:
                raise ValidationFailed("days must be an integer", field='days', value=days)
        subscriptions = service.expiring_subscriptions(get_jwt_identity(), days_ahead=days)
        return subscription_ns.marshal({
            'success': True,
            'days': days if days is not None else current_app.config.get('EXPIRING_WINDOW_DAYS', 7),
            'subscriptions': [subscription.to_dict() for subscription in subscriptions],
        }, expiring_model)
