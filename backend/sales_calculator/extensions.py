# Overview: Shared extension instances; the app factory binds them, models and services import db from here.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate(compare_type=True, render_as_batch=True)
