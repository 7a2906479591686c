"""
Entity Mapper

Converts between wire shapes and the UserEntity domain model.
"""
import dataclasses
from typing import Iterable, List
from userhub.modules.users.domain.user import UserEntity
from userhub.modules.users.schemas import UserDto, UserPostDto, UserPutDto


class EntityMapper:
    """Field mapping between UserEntity and its wire representations."""

    def to_dto(self, entity: UserEntity) -> UserDto:
        return UserDto(
            id=entity.id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            login=entity.login,
        )

    def to_dtos(self, entities: Iterable[UserEntity]) -> List[UserDto]:
        return [self.to_dto(entity) for entity in entities]

    def from_post(self, dto: UserPostDto) -> UserEntity:
        """New entity from a create body; the store assigns the id."""
        return UserEntity(
            id=None,
            first_name=dto.first_name,
            last_name=dto.last_name,
            login=dto.login,
        )

    def from_put(self, dto: UserPutDto) -> UserEntity:
        return UserEntity(
            id=dto.id,
            first_name=dto.first_name,
            last_name=dto.last_name,
            login=dto.login,
        )

    def to_put(self, entity: UserEntity) -> UserPutDto:
        """Materialize an entity as the shape patch documents apply to."""
        return UserPutDto(
            id=entity.id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            login=entity.login,
        )

    def merge_put(self, dto: UserPutDto, entity: UserEntity) -> UserEntity:
        """Copy the represented fields of `dto` onto `entity`, keeping its id."""
        return dataclasses.replace(
            entity,
            first_name=dto.first_name,
            last_name=dto.last_name,
            login=dto.login,
        )
