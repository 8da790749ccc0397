# habit_engine/exceptions.py


class HabitEngineError(Exception):
    """Base class for engine errors"""
    pass


class ValidationError(HabitEngineError):
    """Invalid habit data"""
    pass


class HabitNotFoundError(HabitEngineError):
    """No habit with the requested id"""

    def __init__(self, habit_id: str):
        super().__init__(f"Habit {habit_id!r} not found")
        self.habit_id = habit_id


class StorageError(HabitEngineError):
    """Storage could not be read or written"""
    pass


class StorageCorruptionError(StorageError):
    """Stored data could not be parsed and no backup restored it"""
    pass
