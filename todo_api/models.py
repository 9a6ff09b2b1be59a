from datetime import datetime

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String, event
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# SQLite only autoincrements an INTEGER PRIMARY KEY
TaskId = BigInteger().with_variant(Integer, "sqlite")


class Task(Base):
    __tablename__ = "todo_table"

    id = Column(TaskId, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=False), nullable=True)
    is_done = Column(Boolean, nullable=True)
    task = Column(String, nullable=False)

    @property
    def status(self) -> str:
        return "done" if self.is_done else "pending"

    def apply_defaults(self) -> None:
        """Fill in the values a new task gets when it is first stored"""
        if self.created_at is None:
            self.created_at = datetime.now()
        if self.is_done is None:
            self.is_done = False

    def mark_done(self) -> None:
        self.is_done = True

    def __repr__(self):
        return f"<Task(id={self.id}, task='{self.task}', status='{self.status}')>"


@event.listens_for(Task, "before_insert")
def _task_before_insert(mapper, connection, target: Task) -> None:
    target.apply_defaults()
