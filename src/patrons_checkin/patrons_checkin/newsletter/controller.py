from __future__ import annotations

from flask import Flask

from ..common.http import json_body, ok
from ..container import Container
from .model import NewsletterSignupRequest


def register(app: Flask, container: Container) -> None:
    newsletter = container.newsletter_service

    @app.route("/news/signup", methods=["POST"], endpoint="newsletter_signup")
    def sign_up():
        newsletter.sign_up(NewsletterSignupRequest.from_json(json_body()))
        return ok()

    @app.route("/news/unsubscribe/<unsubscribe_id>", methods=["DELETE"], endpoint="newsletter_unsubscribe")
    def unsubscribe(unsubscribe_id: str):
        newsletter.unsubscribe(unsubscribe_id)
        return ok()
