"""SQLAlchemy persistence for grants, dynamic definitions and user roles."""
