"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from notifier.domain.entities import User
from notifier.infrastructure.models import UserModel


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def find(
        self,
        roles: Sequence[str] | None,
        *,
        exclude_id: int | None = None,
        verified_only: bool = True,
        limit: int | None = None,
    ) -> Sequence[User]:
        """Return users matching ``roles`` ordered by id.

        ``roles`` set to ``None`` matches every role.
        """

        query = self.session.query(UserModel)
        if verified_only:
            query = query.filter(UserModel.is_verified.is_(True))
        if roles is not None:
            query = query.filter(UserModel.role.in_(list(roles)))
        if exclude_id is not None:
            query = query.filter(UserModel.id != exclude_id)
        query = query.order_by(UserModel.id.asc())
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        if user.id is not None:
            model.id = user.id
        model.email = user.email
        model.phone = user.phone
        model.name = user.name
        model.role = user.role.upper()
        model.is_verified = user.is_verified

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            name=model.name,
            role=model.role,
            is_verified=bool(model.is_verified),
            phone=model.phone,
        )


__all__ = ["UserRepository"]
