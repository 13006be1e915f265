"""Unit tests for the Register command."""

import pytest

from crediario.commands.inputs import UserRegisterCommand
from crediario.domain.entities import EMPTY_ID, Person
from crediario.domain.messages import Messages


@pytest.mark.unit
class TestRegister:
    """Register validates locally, then checks email uniqueness, then adds."""

    @pytest.mark.asyncio
    async def test_invalid_input_reports_all_local_failures(self, handler, notifications, person_repo):
        """Test that both local failures are reported and no lookup happens."""
        result = await handler.register(UserRegisterCommand(email="abc", password=""))

        assert result.person_id == EMPTY_ID
        assert not result.succeeded
        assert len(notifications) == 2
        assert Messages.EMAIL_PROPER in notifications.values()
        assert Messages.USER_REGISTER_PASSWORD_PROPER in notifications.values()
        person_repo.get_by_email.assert_not_called()
        person_repo.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_taken_email(self, handler, notifications, person_repo, uow):
        """Test registering an email that already belongs to someone."""
        person_repo.get_by_email.return_value = Person(email="user@email.com")

        result = await handler.register(
            UserRegisterCommand(email="user@email.com", password="123")
        )

        assert result.person_id == EMPTY_ID
        assert notifications.values() == [Messages.USER_REGISTER_EMAIL_ALREADY_TAKEN]
        person_repo.get_by_email.assert_awaited_once()
        person_repo.add.assert_not_called()
        uow.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_registration_returns_added_person_id(self, handler, notifications, person_repo, uow):
        """Test that exactly one person is added and its id is returned."""
        result = await handler.register(
            UserRegisterCommand(
                name="Ana", document_number="123", email="abc@def.com", password="12345"
            )
        )

        assert not notifications.has_notifications()
        person_repo.add.assert_awaited_once()
        added = person_repo.add.call_args.args[0]
        assert result.person_id == added.person_id
        assert result.person_id != EMPTY_ID
        assert result.succeeded
        assert added.email == "abc@def.com"
        assert added.name == "Ana"
        assert added.phone_number == ""
        assert added.is_active
        assert len(added.serial_key) == 32
        uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_failure_returns_sentinel(self, handler, notifications, uow):
        """Test that a failed commit yields the empty id and a commit message."""
        uow.commit.return_value = False

        result = await handler.register(
            UserRegisterCommand(email="abc@def.com", password="12345")
        )

        assert result.person_id == EMPTY_ID
        assert notifications.values() == [Messages.COMMIT_FAILED]

    @pytest.mark.asyncio
    async def test_none_command(self, handler, notifications, person_repo):
        result = await handler.register(None)

        assert result.person_id == EMPTY_ID
        assert notifications.values() == [Messages.COMMAND_REQUIRED]
        person_repo.get_by_email.assert_not_called()
