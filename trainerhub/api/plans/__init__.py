"""
Plans namespace for managing the plan catalog.
"""
from flask_restx import Namespace

plan_ns = Namespace(
    'plans',
    description='Plan catalog operations'
)

from . import routes  # noqa: E402,F401
