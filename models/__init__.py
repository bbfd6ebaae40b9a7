from models.course import Course
from models.lecturer import Lecturer
from models.room import Room
from models.class_name import ClassName
from models.timeslot import Day, DAYS, Slot, TIME_SLOTS
from models.schedule_item import ScheduleItem
from models.store import EntityStore
from models.user import User, UserRole

__all__ = [
    "Course",
    "Lecturer",
    "Room",
    "ClassName",
    "Day",
    "DAYS",
    "Slot",
    "TIME_SLOTS",
    "ScheduleItem",
    "EntityStore",
    "User",
    "UserRole",
]
