import asyncio

from skillsheet.bot import main as run
from skillsheet.services.sheet_service import SheetService
from skillsheet.utils.env import get_log_level, load_env
from skillsheet.utils.logs import setup_logging

if __name__ == '__main__':
    load_env()
    setup_logging(get_log_level())

    # Load (and create if missing) the local sheet database
    service = SheetService()
    service.load()

    # Start the bot
    asyncio.run(run(service))
