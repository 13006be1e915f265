"""End-to-end command flows on the in-memory repositories."""

import pytest
import pytest_asyncio

from crediario.commands.inputs import (
    UserAuthenticateCommand,
    UserChangePasswordCommand,
    UserForgotPasswordCommand,
    UserRegisterCommand,
)
from crediario.core.enums import DeviceStatus
from crediario.domain.entities import EMPTY_ID
from crediario.domain.events import UserForgotPasswordRequestedEvent
from crediario.domain.messages import Messages
from crediario.events.handlers import UserForgotPasswordRequestedEmailHandler
from crediario.repositories.memory_impl import MemoryEmailNotificationRepository


def _login(identification="phone-1", password="secret"):
    return UserAuthenticateCommand(
        user="ana@example.com", password=password, identification=identification
    )


@pytest_asyncio.fixture
async def registered(memory_handler_factory):
    result = await memory_handler_factory().register(
        UserRegisterCommand(name="Ana", email="ana@example.com", password="secret")
    )
    assert result.succeeded
    return result.person_id


@pytest.mark.integration
class TestRegistrationFlow:

    @pytest.mark.asyncio
    async def test_second_registration_with_same_email_is_rejected(self, memory_handler_factory, memory_store, registered):
        handler = memory_handler_factory()

        result = await handler.register(
            UserRegisterCommand(email="ANA@example.com", password="other")
        )

        assert result.person_id == EMPTY_ID
        assert handler.notifications.values() == [Messages.USER_REGISTER_EMAIL_ALREADY_TAKEN]
        assert len(memory_store.persons) == 1

    @pytest.mark.asyncio
    async def test_failed_commit_leaves_nothing_behind(self, memory_handler_factory, memory_store):
        memory_store.fail_next_commit = True

        result = await memory_handler_factory().register(
            UserRegisterCommand(email="ana@example.com", password="secret")
        )

        assert result.person_id == EMPTY_ID
        assert memory_store.persons == {}
        assert memory_store.pending == []


@pytest.mark.integration
class TestSessionRotationFlow:

    @pytest.mark.asyncio
    async def test_repeated_login_from_same_device(self, memory_handler_factory, memory_store, registered):
        first = await memory_handler_factory().authenticate(_login())
        second = await memory_handler_factory().authenticate(_login())

        assert first.succeeded and second.succeeded
        assert first.serial_key != second.serial_key
        assert len(memory_store.devices) == 1
        assert len(memory_store.tokens) == 2
        assert sum(t.active for t in memory_store.tokens.values()) == 1

        person = memory_store.persons[registered]
        assert person.serial_key == second.serial_key
        assert person.token.active
        assert memory_store.tokens[person.token.token_id].active

    @pytest.mark.asyncio
    async def test_switching_devices_retires_the_old_one(self, memory_handler_factory, memory_store, registered):
        await memory_handler_factory().authenticate(_login("phone-1"))
        await memory_handler_factory().authenticate(_login("phone-2"))

        devices = {d.identification: d for d in memory_store.devices.values()}
        assert devices["phone-1"].active is False
        assert devices["phone-1"].device_status == DeviceStatus.INACTIVE
        assert devices["phone-2"].active is True
        assert devices["phone-2"].device_status == DeviceStatus.ACTIVE
        assert all(d.person_id == registered for d in devices.values())

    @pytest.mark.asyncio
    async def test_wrong_password(self, memory_handler_factory, memory_store, registered):
        handler = memory_handler_factory()

        result = await handler.authenticate(_login(password="wrong"))

        assert not result.succeeded
        assert handler.notifications.values() == [Messages.USER_AUTHENTICATE_LOGIN_FAILED]
        assert memory_store.devices == {}

    @pytest.mark.asyncio
    async def test_inactive_account(self, memory_handler_factory, memory_store, registered):
        memory_store.persons[registered].deactivate()
        handler = memory_handler_factory()

        result = await handler.authenticate(_login())

        assert not result.succeeded
        assert handler.notifications.values() == [Messages.USER_AUTHENTICATE_USER_IS_INACTIVE]


@pytest.mark.integration
class TestPasswordFlows:

    @pytest.mark.asyncio
    async def test_forgot_password_then_login_with_emailed_password(self, memory_handler_factory, memory_store, dispatcher, registered):
        dispatcher.subscribe(
            UserForgotPasswordRequestedEvent,
            UserForgotPasswordRequestedEmailHandler(MemoryEmailNotificationRepository(memory_store)),
        )
        serial_key = memory_store.persons[registered].serial_key

        result = await memory_handler_factory().forgot_password(
            UserForgotPasswordCommand(email="ana@example.com")
        )

        assert result.serial_key == serial_key
        assert len(memory_store.email_notifications) == 1
        temporary = memory_store.persons[registered].password
        assert temporary in memory_store.email_notifications[0].body

        assert not (await memory_handler_factory().authenticate(_login())).succeeded
        assert (await memory_handler_factory().authenticate(_login(password=temporary))).succeeded

    @pytest.mark.asyncio
    async def test_forgot_password_for_unknown_email_sends_nothing(self, memory_handler_factory, memory_store, dispatcher):
        received = []
        dispatcher.subscribe(UserForgotPasswordRequestedEvent, received.append)
        handler = memory_handler_factory()

        result = await handler.forgot_password(UserForgotPasswordCommand(email="ghost@example.com"))

        assert result.serial_key == ""
        assert not handler.notifications.has_notifications()
        assert received == []

    @pytest.mark.asyncio
    async def test_change_password_after_login(self, memory_handler_factory, memory_store, registered):
        login = await memory_handler_factory().authenticate(_login("phone-1"))

        changed = await memory_handler_factory().change_password(
            UserChangePasswordCommand(
                identification="phone-1",
                serial_key=login.serial_key,
                old_password="secret",
                new_password="better-secret",
            )
        )

        assert changed.succeeded
        assert changed.serial_key != login.serial_key
        assert memory_store.persons[registered].serial_key == changed.serial_key
        assert not (await memory_handler_factory().authenticate(_login("phone-1"))).succeeded
        assert (
            await memory_handler_factory().authenticate(_login("phone-1", "better-secret"))
        ).succeeded

    @pytest.mark.asyncio
    async def test_change_password_on_an_installation_shared_by_two_people(self, memory_handler_factory, registered):
        await memory_handler_factory().register(
            UserRegisterCommand(name="Bia", email="bia@example.com", password="hers")
        )
        ana = await memory_handler_factory().authenticate(_login("shared"))
        await memory_handler_factory().authenticate(
            UserAuthenticateCommand(user="bia@example.com", password="hers", identification="shared")
        )
        handler = memory_handler_factory()

        result = await handler.change_password(
            UserChangePasswordCommand(
                identification="shared",
                serial_key=ana.serial_key,
                old_password="secret",
                new_password="better-secret",
            )
        )

        assert result.succeeded
        assert not handler.notifications.has_notifications()

    @pytest.mark.asyncio
    async def test_change_password_with_stale_serial_key(self, memory_handler_factory, registered):
        first = await memory_handler_factory().authenticate(_login())
        await memory_handler_factory().authenticate(_login())
        handler = memory_handler_factory()

        result = await handler.change_password(
            UserChangePasswordCommand(
                identification="phone-1",
                serial_key=first.serial_key,
                old_password="secret",
                new_password="x",
            )
        )

        assert not result.succeeded
        assert handler.notifications.values() == [Messages.USER_CHANGE_PASSWORD_PERSON_NOT_FOUND]
