"""Test configuration and fixtures."""

import os

import logfire

# Settings are read from the environment whenever a container is built
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH__JWT_SECRET", "test-secret-with-at-least-32-bytes!!")
os.environ.setdefault("PROVISIONING__RETRY_DELAY_SECONDS", "0")
os.environ.setdefault("PROVISIONING__SETTLE_DELAY_SECONDS", "0")

logfire.configure(send_to_logfire=False, console=False)
