"""
DP Travels Backend - Mail Dispatcher Tests
"""

import pytest

from app.models import EmailContent
from app.services.email_service import DispatchError, MailDispatcher
from app.services.mail_providers import MockMailProvider
from tests.fakes import FlakyMailProvider


CONTENT = EmailContent(
    subject="🧳 New Booking Request from Asha",
    html_body="<p>Namchi</p>",
    from_name="DP Travels Booking",
    reply_to="asha@x.com",
)


@pytest.mark.anyio
async def test_send_addresses_notification(make_dispatcher):
    provider = MockMailProvider()
    dispatcher = make_dispatcher(provider)

    notification = await dispatcher.send(CONTENT)

    assert provider.outbox == [notification]
    assert notification.from_address == "bookings@dptravels.in"
    assert notification.to_address == "owner@dptravels.in"
    assert notification.from_header == '"DP Travels Booking" <bookings@dptravels.in>'
    assert notification.reply_to == "asha@x.com"


@pytest.mark.anyio
async def test_success_first_try_has_no_delay(make_dispatcher, sleeps):
    await make_dispatcher(MockMailProvider()).send(CONTENT)
    assert sleeps == []


@pytest.mark.anyio
async def test_one_failure_then_success(make_dispatcher, sleeps):
    provider = FlakyMailProvider(failures=1)

    await make_dispatcher(provider).send(CONTENT)

    assert provider.calls == 2
    assert len(provider.outbox) == 1
    assert sleeps == [2.0]


@pytest.mark.anyio
async def test_gives_up_after_max_attempts(make_dispatcher, sleeps):
    provider = FlakyMailProvider(failures=10)

    with pytest.raises(DispatchError) as exc_info:
        await make_dispatcher(provider, max_attempts=2).send(CONTENT)

    assert provider.calls == 2
    assert sleeps == [2.0]
    assert exc_info.value.attempts == 2
    assert "attempt 2" in str(exc_info.value)
    assert provider.outbox == []


@pytest.mark.anyio
async def test_single_attempt_never_sleeps(make_dispatcher, sleeps):
    provider = FlakyMailProvider(failures=1)

    with pytest.raises(DispatchError):
        await make_dispatcher(provider, max_attempts=1).send(CONTENT)

    assert provider.calls == 1
    assert sleeps == []


@pytest.mark.anyio
async def test_fixed_delay_between_attempts(make_dispatcher, sleeps):
    provider = FlakyMailProvider(failures=3)

    await make_dispatcher(provider, max_attempts=4, retry_delay=0.5).send(CONTENT)

    assert sleeps == [0.5, 0.5, 0.5]


def test_recipient_defaults_to_sender():
    dispatcher = MailDispatcher(MockMailProvider(), sender="bookings@dptravels.in")
    assert dispatcher.recipient == "bookings@dptravels.in"


def test_max_attempts_must_be_positive():
    with pytest.raises(ValueError):
        MailDispatcher(MockMailProvider(), sender="bookings@dptravels.in", max_attempts=0)
