"""Tests for partner email rendering and delivery."""

import json

import httpx
import pytest

from edusync.config import Settings
from edusync.services.notifications import (
    EmailDelivery,
    EmailDeliveryError,
    EmailNotificationService,
    UnknownTemplateError,
    render_email,
)
from edusync.utils.retry import RetryConfig

NO_WAIT = RetryConfig(max_retries=2, base_delay=0.0)


class TestRenderEmail:
    """Tests for template rendering."""

    def test_application_received(self):
        email = render_email("application_received", {"name": "Ada"}, app_url="https://siso.example")

        assert email.subject == "🎉 Your SISO Partnership Application Has Been Received!"
        assert "Thank You, Ada!" in email.html
        assert "Earn 20% Commission" in email.html

    def test_application_approved_links_dashboard(self):
        email = render_email("application_approved", {"name": "Ada"}, app_url="https://siso.example/")

        assert email.subject == "🎉 Welcome to the SISO Partnership Program!"
        assert "Congratulations, Ada!" in email.html
        assert 'href="https://siso.example/partnership/dashboard"' in email.html

    def test_commission_earned(self):
        email = render_email(
            "commission_earned",
            {"commissionAmount": 498, "clientName": "Acme", "projectValue": 2490, "commissionRate": 20},
            app_url="https://siso.example",
        )

        assert email.subject == "💰 You've Earned a New Commission!"
        assert "£498" in email.html
        assert "<strong>Client:</strong> Acme" in email.html
        assert "20%" in email.html

    def test_data_is_escaped(self):
        email = render_email("application_received", {"name": "<script>x</script>"}, app_url="https://siso.example")

        assert "<script>" not in email.html
        assert "&lt;script&gt;" in email.html

    def test_unknown_template(self):
        with pytest.raises(UnknownTemplateError, match="Unknown email template: welcome"):
            render_email("welcome", {}, app_url="https://siso.example")


class TestEmailNotificationService:
    """Tests for delivery."""

    @pytest.mark.asyncio
    async def test_logs_without_api_key(self):
        service = EmailNotificationService(Settings(resend_api_key=""))

        delivery = await service.send("ada@example.com", "application_received", {"name": "Ada"})

        assert delivery == EmailDelivery.LOGGED

    @pytest.mark.asyncio
    async def test_sends_through_resend(self):
        sent: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return httpx.Response(200, json={"id": "email-1"})

        service = EmailNotificationService(
            Settings(resend_api_key="re_test", email_from="Partners <partners@example.com>"),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            retry_config=NO_WAIT,
        )

        delivery = await service.send("ada@example.com", "application_approved", {"name": "Ada"})

        assert delivery == EmailDelivery.SENT
        [request] = sent
        assert request.url == "https://api.resend.com/emails"
        assert request.headers["Authorization"] == "Bearer re_test"
        body = json.loads(request.content)
        assert body["to"] == ["ada@example.com"]
        assert body["from"] == "Partners <partners@example.com>"
        assert body["subject"] == "🎉 Welcome to the SISO Partnership Program!"
        assert "Congratulations, Ada!" in body["html"]

    @pytest.mark.asyncio
    async def test_retries_server_errors(self):
        statuses = iter([503, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(next(statuses), json={})

        service = EmailNotificationService(
            Settings(resend_api_key="re_test"),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            retry_config=NO_WAIT,
        )

        assert await service.send("ada@example.com", "application_received", {}) == EmailDelivery.SENT

    @pytest.mark.asyncio
    async def test_rejected_message(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(422, json={"message": "Invalid `to` field"})

        service = EmailNotificationService(
            Settings(resend_api_key="re_test"),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            retry_config=NO_WAIT,
        )

        with pytest.raises(EmailDeliveryError, match="422"):
            await service.send("nobody", "application_received", {})

    @pytest.mark.asyncio
    async def test_provider_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={})

        service = EmailNotificationService(
            Settings(resend_api_key="re_test"),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            retry_config=NO_WAIT,
        )

        with pytest.raises(EmailDeliveryError, match="unavailable"):
            await service.send("ada@example.com", "application_received", {})
