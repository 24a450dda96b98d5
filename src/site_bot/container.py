"""Service wiring — builds the dispatcher and its collaborators once."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from site_bot.database.engine import async_session_factory, ping
from site_bot.flows.customer import CustomerFlow
from site_bot.flows.employee import EmployeeFlow
from site_bot.flows.verification import VerificationGate
from site_bot.messages.builder import Messenger
from site_bot.services.dispatcher import Dispatcher
from site_bot.services.inbox import InboundQueue
from site_bot.services.notifications import EmailNotifier
from site_bot.services.otp import OTPHasher, OTPService
from site_bot.services.records import RecordService
from site_bot.services.session_store import SessionStore
from site_bot.services.storage import MediaUploader, ObjectStorage, R2Storage
from site_bot.services.user_service import UserService
from site_bot.services.whatsapp import MessagingTransport, WhatsAppClient


@dataclass
class Container:
    transport: MessagingTransport
    users: UserService
    sessions: SessionStore
    records: RecordService
    otp: OTPService
    messenger: Messenger
    employee_flow: EmployeeFlow
    customer_flow: CustomerFlow
    dispatcher: Dispatcher
    queue: InboundQueue


def build_container(
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
    transport: MessagingTransport | None = None,
    storage: ObjectStorage | None = None,
    hasher: OTPHasher | None = None,
    notifier: EmailNotifier | None = None,
) -> Container:
    """Wire every service; pass fakes to replace the external collaborators."""
    transport = transport or WhatsAppClient()
    storage = storage or R2Storage()
    notifier = notifier or EmailNotifier()

    messenger = Messenger(transport)
    users = UserService(session_factory)
    sessions = SessionStore(session_factory)
    records = RecordService(session_factory)
    otp = OTPService(session_factory, transport, hasher=hasher)

    employee_flow = EmployeeFlow(
        sessions,
        messenger,
        gate=VerificationGate(otp, messenger),
        records=records,
        uploader=MediaUploader(transport, storage),
        notifier=notifier,
    )
    customer_flow = CustomerFlow(sessions, messenger, records=records, notifier=notifier)

    dispatcher = Dispatcher(
        users=users,
        sessions=sessions,
        records=records,
        messenger=messenger,
        employee_flow=employee_flow,
        customer_flow=customer_flow,
        health_check=partial(ping, session_factory),
    )
    return Container(
        transport=transport,
        users=users,
        sessions=sessions,
        records=records,
        otp=otp,
        messenger=messenger,
        employee_flow=employee_flow,
        customer_flow=customer_flow,
        dispatcher=dispatcher,
        queue=InboundQueue(dispatcher.dispatch),
    )
