"""Observability configuration using Logfire.

Every service operation opens a span named ``<service>.<operation>`` and
emits structured events inside it:

    import logfire

    with logfire.span("invite_service.create_invite", organization_id=org_id):
        logfire.info("Invite created", invite_id=str(invite.id))

Invite tokens are bearer credentials; log ``InviteToken.redacted`` only.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from roster.config import Settings

SERVICE_NAME = "roster-api"
SERVICE_VERSION = "0.1.0"


def _should_send(settings: Settings) -> bool:
    # Explicit setting wins, otherwise send whenever a token is configured
    if settings.observability.send_to_logfire is not None:
        return settings.observability.send_to_logfire
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for observability.

    Console output is always on; cloud sending needs
    OBSERVABILITY__LOGFIRE_TOKEN or OBSERVABILITY__SEND_TO_LOGFIRE=true.

    Args:
        settings: Application settings
    """
    send_to_logfire = _should_send(settings)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        debug=settings.debug,
        send_to_logfire=send_to_logfire,
        has_token=bool(settings.observability.logfire_token),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every HTTP request handled by the app.

    Args:
        app: FastAPI application instance
    """

    def _map_request_attributes(request, attributes):
        result = {**attributes}
        if hasattr(request, "method"):
            result["method"] = request.method
        if hasattr(request, "url"):
            result["path"] = request.url.path
        return result

    logfire.instrument_fastapi(
        app,
        capture_headers=False,  # auth_token cookie must stay out of traces
        request_attributes_mapper=_map_request_attributes,
    )
    logfire.info("FastAPI instrumented")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL queries issued through the engine.

    Args:
        engine: SQLAlchemy async engine
    """
    logfire.instrument_sqlalchemy(
        engine=engine.sync_engine,
        enable_commenter=True,  # Add SQL comments with span context
    )
    logfire.info("SQLAlchemy instrumented")


def instrument_httpx() -> None:
    """Trace outbound calls to the identity provider and the email API."""
    logfire.instrument_httpx()
    logfire.info("httpx instrumented")
