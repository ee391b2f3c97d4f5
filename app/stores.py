from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.errors import EmailAlreadyExists
from app.models.task import Task
from app.models.user import Role, User


class UserStore:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, name: str, email: str, password_hash: str, role: Role = Role.user) -> User:
        """Insert a user; raises EmailAlreadyExists if the email is taken.

        A concurrent insert that passes the pre-check still fails on the
        unique index at commit.
        """
        if self.get_by_email(email) is not None:
            raise EmailAlreadyExists(email)

        user = User(name=name, email=email, password=password_hash, role=role)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise EmailAlreadyExists(email) from exc
        self.db.refresh(user)
        return user


class TaskStore:
    def __init__(self, db: Session):
        self.db = db

    def for_owner(self, owner_id: int) -> List[Task]:
        return self.db.query(Task).filter(Task.owner_id == owner_id).order_by(Task.id).all()

    def all_with_owner(self) -> List[Task]:
        return self.db.query(Task).options(joinedload(Task.owner)).order_by(Task.id).all()

    def create(self, title: str, owner_id: int, description: str = "") -> Task:
        task = Task(title=title, description=description, owner_id=owner_id)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task
