from sqlmodel import SQLModel
from reqtrace.database import engine

import reqtrace.models.user  # noqa
import reqtrace.models.workspace  # noqa
import reqtrace.models.project  # noqa
import reqtrace.models.task  # noqa
import reqtrace.models.requirement  # noqa
import reqtrace.models.requirement_history  # noqa
import reqtrace.models.stakeholder  # noqa
import reqtrace.models.meeting  # noqa
import reqtrace.models.links  # noqa


def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)

if __name__ == "__main__":
    create_db_and_tables()
