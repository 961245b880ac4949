from datetime import datetime

import pytest

from database.db_manager import DatabaseManager
from database.dismissed_reminder_dao import DismissedReminderDAO
from database.schedule_dao import ScheduleDAO
from database.task_dao import TaskDAO
from services.materialization_service import MaterializationService
from services.reminder_service import ReminderService
from services.schedule_service import ScheduleService
from services.task_service import TaskService


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def schedule_dao(db):
    return ScheduleDAO(db)


@pytest.fixture
def task_dao(db):
    return TaskDAO(db)


@pytest.fixture
def dismissed_dao(db):
    return DismissedReminderDAO(db)


@pytest.fixture
def schedule_service(schedule_dao):
    return ScheduleService(schedule_dao)


@pytest.fixture
def task_service(task_dao):
    return TaskService(task_dao)


@pytest.fixture
def materializer(schedule_dao, task_dao):
    return MaterializationService(schedule_dao, task_dao)


@pytest.fixture
def reminder_service(task_service, schedule_service):
    return ReminderService(task_service, schedule_service)


@pytest.fixture
def fixed_now():
    return datetime(2024, 3, 15, 12, 0, 0)
