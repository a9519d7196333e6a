"""
Flask blueprints for the Website Audit API.
"""

from flask import Blueprint

# Create blueprints
audit_bp = Blueprint('audit', __name__)

# Import routes to register them
from . import audit
