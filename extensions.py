"""Flask extension instances.

Created unbound here and attached to the application in ``create_app`` so
models and services can import them without a circular dependency on the
app module.
"""
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_bcrypt import Bcrypt
from flask_mail import Mail

db = SQLAlchemy()
migrate = Migrate()
bcrypt = Bcrypt()
mail = Mail()
