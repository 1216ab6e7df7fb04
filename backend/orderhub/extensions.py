# Overview: Shared SQLAlchemy engine/session holder and Alembic integration.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# Units of work hold pooled connections across several procedure calls;
# pre-ping drops connections the database closed while they sat idle.
db = SQLAlchemy(engine_options={"pool_pre_ping": True})
migrate = Migrate()
