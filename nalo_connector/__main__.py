"""One-shot connector job: python -m nalo_connector"""

import asyncio
import json
import logging
import sys

from nalo_connector.config import export_error_reporting, settings
from nalo_connector.connector import run_connector
from nalo_connector.domain.exceptions import ConnectorError
from nalo_connector.domain.models import Credentials
from nalo_connector.infrastructure.clients.nalo import NaloClient
from nalo_connector.infrastructure.database.session import init_db, session_scope
from nalo_connector.infrastructure.observability.logging import setup_logging

logger = logging.getLogger("nalo_connector")


async def main() -> int:
    if not settings.nalo_login or not settings.nalo_password:
        logger.error("NALO_LOGIN and NALO_PASSWORD must be set")
        return 1

    try:
        parameters = json.loads(settings.nalo_parameters) if settings.nalo_parameters else None
    except ValueError:
        logger.error("NALO_PARAMETERS is not valid JSON")
        return 1

    init_db()
    credentials = Credentials(login=settings.nalo_login, password=settings.nalo_password)
    try:
        with session_scope() as db:
            async with NaloClient() as client:
                await run_connector(credentials, client, db, parameters=parameters)
    except ConnectorError as e:
        logger.error(f"Connector failed: {e}", extra={"error_code": e.code})
        return 1

    return 0


if __name__ == "__main__":
    setup_logging(settings.log_level, settings.service_name)
    export_error_reporting(settings)
    sys.exit(asyncio.run(main()))
