"""Persistence adapter for the user directory consumed by the dispatch core."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from courier_dispatch.domain.entities import User
from courier_dispatch.infrastructure.models import UserModel


class UserRepository:
    """Answer identity lookups: ``get``, ``list_by_role`` and ``is_active``."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def list_by_role(self, role: str) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .filter(UserModel.role == role)
            .order_by(UserModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def is_active(self, user_id: int) -> bool:
        model = self.session.get(UserModel, user_id)
        return bool(model is not None and model.is_active)

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            phone=model.phone,
            role=model.role,
            is_active=model.is_active,
        )

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        if user.id is not None:
            model.id = user.id
        model.name = user.name
        model.phone = user.phone
        model.role = user.role
        model.is_active = user.is_active


__all__ = ["UserRepository"]
