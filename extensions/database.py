# extensions/database.py
import logging

from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from utils.exceptions import ServerError

db = SQLAlchemy()
migrate = Migrate()

logger = logging.getLogger(__name__)


def commit_session():
    """
    Commit the current session.
    - IntegrityError: rolled back and re-raised so services can map constraint hits
    - any other SQLAlchemyError: rolled back and surfaced as a generic ServerError
    """
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("database commit failed")
        raise ServerError()
