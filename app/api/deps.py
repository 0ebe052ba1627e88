"""
app/api/deps.py

Purpose: Request-scoped access to process-wide resources

The Mongo client, mail sender and payment service are built once in the app
lifespan and kept on app.state; routes receive them through these providers.
"""

from fastapi import Depends, Request

from app.db.mongo import MongoDatabase
from app.services.mail_service import MailService
from app.services.otp_service import OTPService
from app.services.payment_service import PaymentService
from app.services.user_service import UserService


def get_database(request: Request) -> MongoDatabase:
    return request.app.state.mongo


def get_user_service(database: MongoDatabase = Depends(get_database)) -> UserService:
    return UserService(database.users)


def get_mail_service(request: Request) -> MailService:
    return request.app.state.mailer


def get_otp_service(
    users: UserService = Depends(get_user_service),
    mailer: MailService = Depends(get_mail_service),
) -> OTPService:
    return OTPService(users, mailer)


def get_payment_service(request: Request) -> PaymentService:
    return request.app.state.payments
