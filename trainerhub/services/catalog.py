"""
Plan catalog: definitions of the priced tiers trainers can be put on.

Mutations are administrator-only, run in one transaction each and leave an
audit entry behind.
"""
from decimal import Decimal

from flask import current_app
from sqlalchemy import func

from trainerhub import db
from trainerhub.models import AuditAction, Plan, PlanType, SubscriptionStatus, User

from .audit import AuditTrail
from .authorization import require_admin
from .errors import PlanInUse, PlanNotFound, TypeChangeBlocked, ValidationFailed
from .pricing import MONTHS_PER_YEAR
from .transactions import commit_atomically
from .validation import (DECIMAL_PLACES, coerce_bool, coerce_decimal, coerce_enum,
                         coerce_int, coerce_optional_text)

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 255
COPY_SUFFIX = " (copy)"

PLAN_FIELDS = (
    'name', 'description', 'plan_type', 'monthly_price', 'annual_price',
    'max_students', 'features', 'active', 'visible_on_landing', 'display_order',
)

SORT_OPTIONS = {
    'name_asc': (Plan.name.asc(),),
    'name_desc': (Plan.name.desc(),),
    'monthly_price_asc': (Plan.monthly_price.asc(),),
    'monthly_price_desc': (Plan.monthly_price.desc(),),
    'created_at_asc': (Plan.created_at.asc(),),
    'created_at_desc': (Plan.created_at.desc(),),
    'display_order': (Plan.display_order.asc(),),
}


def _clean_name(value):
    if not isinstance(value, str) or not value.strip():
        raise ValidationFailed("name must not be empty", field='name')
    value = value.strip()
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationFailed(f"name must be at most {NAME_MAX_LENGTH} characters", field='name')
    return value


def _clean_features(value):
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValidationFailed("features must be a list of strings", field='features')
    features = []
    for feature in value:
        if not isinstance(feature, str) or not feature.strip():
            raise ValidationFailed("features must be non-empty strings", field='features')
        features.append(feature.strip())
    return features


def _clean_max_students(value):
    value = coerce_int(value, 'max_students')
    if value < 0:
        raise ValidationFailed("max_students must not be negative", field='max_students')
    return value


def _clean_price(value, field, allow_none=False):
    price = coerce_decimal(value, field, allow_none=allow_none, places=DECIMAL_PLACES)
    if price is not None and price < 0:
        raise ValidationFailed(f"{field} must not be negative", field=field)
    return price


FIELD_CLEANERS = {
    'name': _clean_name,
    'description': lambda v: coerce_optional_text(v, 'description', DESCRIPTION_MAX_LENGTH),
    'plan_type': lambda v: coerce_enum(PlanType, v, 'plan_type').value,
    'monthly_price': lambda v: _clean_price(v, 'monthly_price'),
    'annual_price': lambda v: _clean_price(v, 'annual_price', allow_none=True),
    'max_students': _clean_max_students,
    'features': _clean_features,
    'active': lambda v: coerce_bool(v, 'active'),
    'visible_on_landing': lambda v: coerce_bool(v, 'visible_on_landing'),
    'display_order': lambda v: coerce_int(v, 'display_order'),
}


def validate_plan_fields(fields, current=None):
    """
    Clean plan fields and check the cross-field rules on the merged result.

    Args:
        fields (dict): Submitted values; unknown keys are ignored
        current (dict, optional): Values of the plan being updated

    Returns:
        dict: Cleaned values for the submitted keys

    Raises:
        ValidationFailed: With ``errors`` mapping each offending field to a message
    """
    errors = {}
    cleaned = {}
    for field in PLAN_FIELDS:
        if field not in fields:
            continue
        try:
            cleaned[field] = FIELD_CLEANERS[field](fields[field])
        except ValidationFailed as e:
            errors[field] = e.message

    merged = dict(current or {})
    merged.update(cleaned)
    if 'name' not in merged and 'name' not in errors:
        errors['name'] = "name is required"
    if 'monthly_price' not in merged and 'monthly_price' not in errors:
        errors['monthly_price'] = "monthly_price is required"

    if not errors:
        plan_type = PlanType(merged.get('plan_type', PlanType.PUBLIC.value))
        monthly = Decimal(merged['monthly_price'])
        annual = merged.get('annual_price')
        if plan_type is PlanType.LIFETIME:
            if monthly != 0:
                errors['monthly_price'] = "lifetime plans must have a monthly_price of 0"
            if merged.get('visible_on_landing'):
                errors['visible_on_landing'] = "lifetime plans cannot be shown on the landing page"
        elif monthly <= 0:
            errors['monthly_price'] = "public plans must have a positive monthly_price"
        if annual is not None and Decimal(annual) > monthly * MONTHS_PER_YEAR:
            errors['annual_price'] = "annual_price must not exceed 12 x monthly_price"

    if errors:
        raise ValidationFailed("Plan failed validation", errors=errors)
    return cleaned


def _plan_values(plan):
    return {field: getattr(plan, field) for field in PLAN_FIELDS}


class PlanCatalog:
    """Creates, edits and lists plans."""

    def __init__(self, audit=None):
        self.audit = audit or AuditTrail()

    # Reads

    def get(self, plan_id):
        plan = db.session.get(Plan, plan_id) if plan_id is not None else None
        if plan is None:
            raise PlanNotFound(plan_id=plan_id)
        return plan

    def list(self, active=None, visible_on_landing=None, plan_type=None, sort_by='display_order'):
        """
        List plans with optional filters.

        Args:
            active (bool, optional): Filter by active flag
            visible_on_landing (bool, optional): Filter by landing visibility
            plan_type (PlanType or str, optional): Filter by plan type
            sort_by (str): One of ``SORT_OPTIONS``

        Returns:
            list[Plan]
        """
        if sort_by not in SORT_OPTIONS:
            raise ValidationFailed(f"sort_by must be one of {sorted(SORT_OPTIONS)}",
                                   field='sort_by', value=sort_by)
        query = Plan.query
        if active is not None:
            query = query.filter(Plan.active == active)
        if visible_on_landing is not None:
            query = query.filter(Plan.visible_on_landing == visible_on_landing)
        if plan_type is not None:
            query = query.filter(Plan.plan_type == coerce_enum(PlanType, plan_type, 'plan_type').value)
        return query.order_by(*SORT_OPTIONS[sort_by], Plan.id.asc()).all()

    def landing_plans(self):
        """Active plans shown on the public landing page, in display order."""
        return self.list(active=True, visible_on_landing=True)

    def count_trainers_on_plan(self, plan_id):
        """Number of trainers whose current subscription points at the plan."""
        self.get(plan_id)
        return self._trainer_query(plan_id).count()

    def trainers_on_plan(self, plan_id):
        self.get(plan_id)
        return self._trainer_query(plan_id).order_by(User.name, User.id).all()

    def _trainer_query(self, plan_id):
        return User.query.filter(User.plan_id == plan_id, User.is_trainer)

    def _lock(self, plan_id):
        # FOR UPDATE so the trainer count below cannot change under us
        plan = Plan.query.filter(Plan.id == plan_id).with_for_update().first()
        if plan is None:
            raise PlanNotFound(plan_id=plan_id)
        return plan

    def _ensure_no_active_trainers(self, plan):
        subscribed = self._trainer_query(plan.id).filter(
            User.subscription_status == SubscriptionStatus.ACTIVE.value
        ).count()
        if subscribed:
            raise PlanInUse("Plan has trainers with an active subscription",
                            plan_id=plan.id, trainer_count=subscribed)

    def _next_display_order(self):
        highest = db.session.query(func.max(Plan.display_order)).scalar()
        return 0 if highest is None else highest + 1

    # Mutations

    def create(self, actor_id, fields):
        """
        Create a plan.

        ``display_order`` defaults to the end of the list.

        Raises:
            Unauthorized, ValidationFailed
        """
        require_admin(actor_id)
        cleaned = validate_plan_fields(fields)

        def operation():
            values = dict(cleaned)
            values.setdefault('display_order', self._next_display_order())
            plan = Plan(**values)
            db.session.add(plan)
            db.session.flush()
            self.audit.record(AuditAction.PLAN_CREATE, int(actor_id), plan_id=plan.id, name=plan.name)
            return plan

        plan = commit_atomically(operation, "plan create")
        current_app.logger.info("Plan %s created by admin %s", plan.id, actor_id)
        return plan

    def update(self, actor_id, plan_id, fields):
        """
        Partially update a plan; the merged result must still be valid.

        Deactivating through ``active=False`` follows the same rule as
        ``set_active``.

        Raises:
            Unauthorized, PlanNotFound, ValidationFailed, TypeChangeBlocked,
            PlanInUse
        """
        require_admin(actor_id)

        def operation():
            plan = self._lock(plan_id)
            cleaned = validate_plan_fields(fields, current=_plan_values(plan))
            new_type = cleaned.get('plan_type', plan.plan_type)
            if new_type != plan.plan_type:
                in_use = self._trainer_query(plan.id).count()
                if in_use:
                    raise TypeChangeBlocked(plan_id=plan.id, trainer_count=in_use)
            if cleaned.get('active') is False:
                self._ensure_no_active_trainers(plan)
            for field, value in cleaned.items():
                setattr(plan, field, value)
            self.audit.record(AuditAction.PLAN_UPDATE, int(actor_id), plan_id=plan.id,
                              fields=sorted(cleaned))
            return plan

        plan = commit_atomically(operation, "plan update")
        current_app.logger.info("Plan %s updated by admin %s", plan.id, actor_id)
        return plan

    def delete(self, actor_id, plan_id):
        """
        Delete a plan nobody is on.

        Raises:
            Unauthorized, PlanNotFound, PlanInUse
        """
        require_admin(actor_id)

        def operation():
            plan = self._lock(plan_id)
            in_use = self._trainer_query(plan.id).count()
            if in_use:
                raise PlanInUse(plan_id=plan.id, trainer_count=in_use)
            self.audit.record(AuditAction.PLAN_DELETE, int(actor_id), plan_id=plan.id, name=plan.name)
            db.session.delete(plan)

        commit_atomically(operation, "plan delete")
        current_app.logger.info("Plan %s deleted by admin %s", plan_id, actor_id)

    def set_active(self, actor_id, plan_id, active):
        """
        Activate or deactivate a plan.

        A plan with trainers actively subscribed to it cannot be deactivated.

        Raises:
            Unauthorized, PlanNotFound, ValidationFailed, PlanInUse
        """
        require_admin(actor_id)
        active = coerce_bool(active, 'active')

        def operation():
            plan = self._lock(plan_id)
            if not active:
                self._ensure_no_active_trainers(plan)
            plan.active = active
            self.audit.record(AuditAction.PLAN_TOGGLE, int(actor_id), plan_id=plan.id, active=active)
            return plan

        plan = commit_atomically(operation, "plan status change")
        current_app.logger.info("Plan %s set active=%s by admin %s", plan.id, active, actor_id)
        return plan

    def duplicate(self, actor_id, plan_id):
        """
        Copy a plan under a new name at the end of the list.

        Not idempotent: every call creates a new plan.

        Raises:
            Unauthorized, PlanNotFound
        """
        require_admin(actor_id)

        def operation():
            source = self.get(plan_id)
            values = _plan_values(source)
            values['name'] = source.name[:NAME_MAX_LENGTH - len(COPY_SUFFIX)] + COPY_SUFFIX
            values['display_order'] = self._next_display_order()
            copy = Plan(**values)
            db.session.add(copy)
            db.session.flush()
            self.audit.record(AuditAction.PLAN_DUPLICATE, int(actor_id), plan_id=copy.id,
                              source_plan_id=source.id)
            return copy

        copy = commit_atomically(operation, "plan duplicate")
        current_app.logger.info("Plan %s duplicated as %s by admin %s", plan_id, copy.id, actor_id)
        return copy

    def reorder(self, actor_id, plan_id, new_order):
        """
        Move a plan to position ``new_order`` and renumber the list.

        Plans are ordered by (display_order, id); the moved plan displaces its
        neighbours by one and positions out of range clamp to either end.
        Afterwards display orders run 0..n-1 without gaps.

        Returns:
            list[Plan]: All plans in their new order

        Raises:
            Unauthorized, PlanNotFound, ValidationFailed
        """
        require_admin(actor_id)
        new_order = coerce_int(new_order, 'new_order')

        def operation():
            target = self.get(plan_id)
            others = [plan for plan in Plan.query.order_by(Plan.display_order, Plan.id).all()
                      if plan.id != target.id]
            position = min(max(new_order, 0), len(others))
            others.insert(position, target)
            for index, plan in enumerate(others):
                plan.display_order = index
            self.audit.record(AuditAction.PLAN_REORDER, int(actor_id), plan_id=target.id,
                              position=position)
            return others

        plans = commit_atomically(operation, "plan reorder")
        current_app.logger.info("Plan %s moved to position %s by admin %s", plan_id, new_order, actor_id)
        return plans
