"""
Subscriptions namespace for assigning plans to trainers and canceling them.
"""
from flask_restx import Namespace

subscription_ns = Namespace(
    'subscriptions',
    description='Trainer subscription operations'
)

from . import routes  # noqa: E402,F401
