from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .area_services.mysql_service_repository import MySQLServiceRepository
from .area_services.service import ServiceLifecycleService
from .checkins.service import CheckInService
from .core.constants import DEFAULT_MAIL_SENDER, DEFAULT_RECAPTCHA_THRESHOLD, DEFAULT_UNSUBSCRIBE_URL
from .database.connection import DBConfig, DatabaseConnection
from .managers.gate import AuthenticationGate
from .managers.mysql_manager_repository import MySQLManagerRepository
from .managers.mysql_session_repository import MySQLSessionRepository
from .managers.passwords import PasswordHasher
from .managers.service import ManagerAuthService
from .managers.sessions import SessionIssuer
from .newsletter.captcha import RecaptchaVerifier
from .newsletter.mailer import SmtpMailer
from .newsletter.mysql_marketing_repository import MySQLMarketingUserRepository
from .newsletter.service import NewsletterService
from .venues.mysql_venue_repository import MySQLVenueRepository
from .venues.service import VenueService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    managers_repo: MySQLManagerRepository
    sessions_repo: MySQLSessionRepository
    venues_repo: MySQLVenueRepository
    services_repo: MySQLServiceRepository
    marketing_repo: MySQLMarketingUserRepository

    gate: AuthenticationGate
    manager_auth_service: ManagerAuthService
    lifecycle_service: ServiceLifecycleService
    checkin_service: CheckInService
    venue_service: VenueService
    newsletter_service: NewsletterService


def build_container(*, db_config: dict, newsletter_config: Optional[dict] = None) -> Container:
    newsletter_config = newsletter_config or {}
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    managers_repo = MySQLManagerRepository(conn)
    sessions_repo = MySQLSessionRepository(conn)
    venues_repo = MySQLVenueRepository(conn)
    services_repo = MySQLServiceRepository(conn)
    marketing_repo = MySQLMarketingUserRepository(conn)

    gate = AuthenticationGate(sessions_repo)
    manager_auth_service = ManagerAuthService(
        managers_repo,
        sessions_repo,
        venues_repo,
        services_repo,
        passwords=PasswordHasher(),
        issuer=SessionIssuer(sessions_repo),
    )
    lifecycle_service = ServiceLifecycleService(services_repo, manager_auth_service)
    checkin_service = CheckInService(venues_repo, services_repo)
    venue_service = VenueService(venues_repo)
    newsletter_service = NewsletterService(
        marketing_repo,
        RecaptchaVerifier(
            newsletter_config.get("recaptcha_secret", ""),
            threshold=float(newsletter_config.get("recaptcha_threshold", DEFAULT_RECAPTCHA_THRESHOLD)),
        ),
        SmtpMailer(
            newsletter_config.get("smtp_host", ""),
            int(newsletter_config.get("smtp_port", 587)),
            username=newsletter_config.get("smtp_user", ""),
            password=newsletter_config.get("smtp_password", ""),
            sender=newsletter_config.get("mail_sender", DEFAULT_MAIL_SENDER),
        ),
        unsubscribe_url=newsletter_config.get("unsubscribe_url", DEFAULT_UNSUBSCRIBE_URL),
    )

    return Container(
        conn=conn,
        managers_repo=managers_repo,
        sessions_repo=sessions_repo,
        venues_repo=venues_repo,
        services_repo=services_repo,
        marketing_repo=marketing_repo,
        gate=gate,
        manager_auth_service=manager_auth_service,
        lifecycle_service=lifecycle_service,
        checkin_service=checkin_service,
        venue_service=venue_service,
        newsletter_service=newsletter_service,
    )
