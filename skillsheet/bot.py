import asyncio
import logging
import os
import pathlib
from typing import Optional

import discord
from discord.ext import commands

from skillsheet.services.sheet_service import SheetService
from skillsheet.utils.env import load_env

logger = logging.getLogger(__name__)


def get_intents() -> discord.Intents:
    # Slash commands only, no message content needed
    return discord.Intents.default()


class SkillSheetBot(commands.Bot):
    def __init__(self, sheet_service: SheetService):
        super().__init__(command_prefix='/', intents=get_intents())
        self.sheet_service = sheet_service

    async def setup_hook(self):
        cogs_path = pathlib.Path(__file__).parent / 'cogs'
        for file in cogs_path.glob('*_cog.py'):
            module = f'skillsheet.cogs.{file.stem}'
            try:
                await self.load_extension(module)
                logger.info(f'Loaded {module}')
            except Exception:
                logger.error(f'Failed to load {module}', exc_info=True)

    async def on_ready(self):
        guild_id = os.getenv('GUILD_ID')
        if not guild_id:
            raise RuntimeError('GUILD_ID not set in environment or .env')

        guild = discord.Object(id=int(guild_id))
        self.tree.copy_global_to(guild=guild)
        await self.tree.sync(guild=guild)
        logger.info(f'Bot ready! Synced commands to guild {guild_id}')


async def main(service: Optional[SheetService] = None):
    load_env()
    token = os.getenv('DISCORD_TOKEN')
    if not token:
        raise RuntimeError('DISCORD_TOKEN not set in environment or .env')

    if service is None:
        service = SheetService()
        service.load()

    bot = SkillSheetBot(service)
    try:
        async with bot:
            await bot.start(token)
    except Exception:
        logger.error('Bot failed due to an exception', exc_info=True)


if __name__ == '__main__':
    asyncio.run(main())
