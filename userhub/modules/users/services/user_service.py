"""
User Service

Business logic for the user resource: create, read, upsert, partial update,
delete and paging. Raises the errors in `domain.exceptions`; the API layer
turns them into responses.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional
from userhub.modules.users.domain.exceptions import (
    BadRequestError,
    UnprocessableEntityError,
    UserNotFoundError,
)
from userhub.modules.users.domain.user import UserEntity
from userhub.modules.users.repositories.user_repository import UserRepository
from userhub.modules.users.schemas import UserDto, UserPostDto, UserPutDto
from userhub.modules.users.services.mapper import EntityMapper
from userhub.modules.users.services.patching import apply_patch, parse_patch_document
from userhub.modules.users.services import validation

logger = logging.getLogger("userhub.users.service")

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 20


@dataclass(frozen=True)
class PageRequest:
    page_number: int = DEFAULT_PAGE_NUMBER
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def clamp(cls, page_number: int, page_size: int) -> "PageRequest":
        """Page number floors at 1; page size is kept within [1, MAX_PAGE_SIZE]."""
        return cls(
            page_number=max(1, page_number),
            page_size=min(max(1, page_size), MAX_PAGE_SIZE),
        )


@dataclass
class UserPage:
    items: List[UserDto]
    page: PageRequest


@dataclass(frozen=True)
class ReplaceOutcome:
    user_id: uuid.UUID
    inserted: bool


def parse_user_id(raw: Any) -> Optional[uuid.UUID]:
    """Parse a route identifier; None when it is not a UUID."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (ValueError, TypeError, AttributeError):
        return None


class UserService:
    """Service for user resource business logic."""

    def __init__(self, repository: UserRepository, mapper: Optional[EntityMapper] = None):
        self.repository = repository
        self.mapper = mapper or EntityMapper()

    async def _require_user(self, raw_id: Any) -> UserEntity:
        user_id = parse_user_id(raw_id)
        if user_id is None:
            raise UserNotFoundError(raw_id)
        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def get_user(self, raw_id: Any) -> UserDto:
        """Get user by ID."""
        logger.debug(f"[UserService.get_user] user_id={raw_id}")
        user = await self._require_user(raw_id)
        return self.mapper.to_dto(user)

    async def create_user(self, payload: Any) -> UserEntity:
        """
        Create a user from a decoded POST body.

        Structural failures that involve `login` are unprocessable; any other
        structural failure makes the whole request bad. A well-formed login
        is then scanned for characters that are not letters or digits.
        """
        logger.debug(f"[UserService.create_user] payload_type={type(payload).__name__}")
        if not isinstance(payload, dict):
            raise BadRequestError("A user object is required in the request body")

        values = UserPostDto.canonicalize(payload)
        dto, errors = validation.parse_model(UserPostDto, values)
        errors = validation.merge_errors(errors, validation.validate_create(values, skip=errors))
        if errors:
            if validation.LOGIN in errors:
                raise UnprocessableEntityError(errors)
            raise BadRequestError(f"Malformed user body: {', '.join(sorted(errors))}")

        errors = validation.validate_login_characters(dto.login)
        if errors:
            raise UnprocessableEntityError(errors)

        created = await self.repository.insert(self.mapper.from_post(dto))
        logger.info(f"[UserService.create_user] created | user_id={created.id}, login={created.login}")
        return created

    async def replace_user(self, raw_id: Any, payload: Any) -> ReplaceOutcome:
        """
        Replace the user at `raw_id`, inserting it when absent.

        The route identifier is authoritative: any id in the body is ignored.
        """
        logger.debug(f"[UserService.replace_user] user_id={raw_id}")
        user_id = parse_user_id(raw_id)
        if user_id is None or user_id.int == 0:
            raise BadRequestError(f"'{raw_id}' is not a valid user identifier")
        if payload is None:
            raise BadRequestError("A user object is required in the request body")
        if not isinstance(payload, dict):
            raise BadRequestError("The request body must be a user object")

        values = UserPutDto.canonicalize(payload)
        values.pop("id", None)
        dto, errors = validation.parse_model(UserPutDto, values)
        errors = validation.merge_errors(errors, validation.validate_replace(values, skip=errors))
        if errors:
            raise UnprocessableEntityError(errors)

        dto = dto.model_copy(update={"id": user_id})
        stored, inserted = await self.repository.update_or_insert(self.mapper.from_put(dto))
        logger.info(f"[UserService.replace_user] {'inserted' if inserted else 'updated'} | user_id={stored.id}")
        return ReplaceOutcome(user_id=stored.id, inserted=inserted)

    async def patch_user(self, raw_id: Any, document: Any) -> None:
        """
        Apply a JSON Patch document to the user at `raw_id`.

        The patch runs against the replace-shape of the stored user and the
        result is validated like a PUT body. Nothing is written unless both
        the patch and the validation succeed.
        """
        logger.debug(f"[UserService.patch_user] user_id={raw_id}")
        if document is None:
            raise BadRequestError("A patch document is required in the request body")
        operations = parse_patch_document(document)

        user = await self._require_user(raw_id)
        patched_values = self.mapper.to_put(user).model_dump(mode="json", by_alias=True)
        patch_errors = apply_patch(patched_values, operations)

        patched, type_errors = validation.parse_model(UserPutDto, patched_values)
        errors = validation.merge_errors(
            patch_errors,
            type_errors,
            validation.validate_replace(patched_values, skip=type_errors),
        )
        if errors:
            logger.debug(f"[UserService.patch_user] rejected | user_id={user.id}, fields={sorted(errors)}")
            raise UnprocessableEntityError(errors)

        await self.repository.update(self.mapper.merge_put(patched, user))
        logger.info(f"[UserService.patch_user] updated | user_id={user.id}, operations={len(operations)}")

    async def delete_user(self, raw_id: Any) -> None:
        """Delete user by ID."""
        logger.debug(f"[UserService.delete_user] user_id={raw_id}")
        user = await self._require_user(raw_id)
        await self.repository.delete(user.id)
        logger.info(f"[UserService.delete_user] deleted | user_id={user.id}")

    async def list_users(self, page_number: int = DEFAULT_PAGE_NUMBER, page_size: int = DEFAULT_PAGE_SIZE) -> UserPage:
        """One page of users mapped to their output shape."""
        page = PageRequest.clamp(page_number, page_size)
        logger.debug(f"[UserService.list_users] page_number={page.page_number}, page_size={page.page_size}")
        users = await self.repository.get_page(page.page_number, page.page_size)
        return UserPage(items=self.mapper.to_dtos(users), page=page)
