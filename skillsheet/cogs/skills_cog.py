import logging
from typing import Optional

from discord import Interaction, app_commands
from discord.ext import commands

from skillsheet.components.sheet import (
    entries_embed,
    fmt_duration,
    fmt_exp,
    sheet_embed,
)
from skillsheet.services.exp_engine import recompute
from skillsheet.services.sheet_service import SheetService
from skillsheet.utils.constants import MAX_AUTOCOMPLETE_CHOICES
from skillsheet.utils.env import get_owner_id
from skillsheet.utils.errors import IndexOutOfRange, InvalidEntry, SkillNotFound

logger = logging.getLogger(__name__)

USER_ERRORS = (SkillNotFound, IndexOutOfRange, InvalidEntry)


class SkillsCog(commands.Cog):
    def __init__(self, bot: commands.Bot, service: SheetService):
        self.bot = bot
        self.service = service
        self.owner_id: Optional[int] = get_owner_id()

    async def interaction_check(self, interaction: Interaction) -> bool:
        if self.owner_id is not None and interaction.user.id != self.owner_id:
            await interaction.response.send_message(
                'This sheet belongs to someone else.', ephemeral=True
            )
            return False
        return True

    async def _error(self, interaction: Interaction, error: Exception) -> None:
        command = interaction.command.name if interaction.command else '?'
        logger.debug(f'Rejected /{command}: {error}')
        await interaction.response.send_message(f'❌ {error}', ephemeral=True)

    # Autocomplete for skill, value is the skill id
    async def skill_autocomplete(self, interaction: Interaction, current: str):
        '''Autocomplete skill names from the sheet.'''
        matches = self.service.sheet.find_skills(current)
        return [
            app_commands.Choice(name=skill.name[:100], value=skill_id)
            for skill_id, skill in matches[:MAX_AUTOCOMPLETE_CHOICES]
        ]

    # Command: /sheet
    @app_commands.command(name='sheet', description='Show your skill sheet')
    async def sheet(self, interaction: Interaction):
        self.service.refresh()
        await interaction.response.send_message(embed=sheet_embed(self.service.sheet))

    # Command: /player
    @app_commands.command(name='player', description='Rename the sheet owner')
    @app_commands.describe(name='Name shown at the top of the sheet')
    async def player(self, interaction: Interaction, name: str):
        self.service.set_player_name(name)
        await interaction.response.send_message(f'✅ Player name set to **{name}**')

    # Command: /skill_new
    @app_commands.command(name='skill_new', description='Start tracking a new skill')
    @app_commands.describe(name='Skill name (default: "new skill")')
    async def skill_new(self, interaction: Interaction, name: Optional[str] = None):
        skill_id = self.service.new_skill(name)
        skill = self.service.sheet.get_skill(skill_id)
        await interaction.response.send_message(f'✅ New skill: **{skill.name}**')

    # Command: /skill_rename
    @app_commands.command(name='skill_rename', description='Rename a skill')
    @app_commands.describe(skill='Skill to rename', name='New name')
    @app_commands.autocomplete(skill=skill_autocomplete)
    async def skill_rename(self, interaction: Interaction, skill: str, name: str):
        try:
            self.service.rename_skill(skill, name)
        except USER_ERRORS as e:
            await self._error(interaction, e)
            return
        await interaction.response.send_message(f'✅ Skill renamed to **{name}**')

    # Command: /skill_delete
    @app_commands.command(
        name='skill_delete', description='Delete a skill and all of its entries'
    )
    @app_commands.describe(skill='Skill to delete')
    @app_commands.autocomplete(skill=skill_autocomplete)
    async def skill_delete(self, interaction: Interaction, skill: str):
        try:
            removed = self.service.delete_skill(skill)
        except USER_ERRORS as e:
            await self._error(interaction, e)
            return
        await interaction.response.send_message(
            f'🗑️ Deleted **{removed.name}** ({len(removed.records)} entries)'
        )

    # Command: /entries
    @app_commands.command(name='entries', description="List a skill's entries")
    @app_commands.describe(skill='Skill to show')
    @app_commands.autocomplete(skill=skill_autocomplete)
    async def entries(self, interaction: Interaction, skill: str):
        try:
            target = self.service.sheet.get_skill(skill)
        except USER_ERRORS as e:
            await self._error(interaction, e)
            return
        # potential_bonus depends on the current day
        recompute(target, self.service.clock())
        await interaction.response.send_message(
            embed=entries_embed(target), ephemeral=True
        )

    # Command: /log
    @app_commands.command(name='log', description='Log time spent on a skill')
    @app_commands.describe(
        skill='Skill you practiced',
        duration='Minutes spent (default: 0)',
        date_occurred='When it happened i.e. YYYY-MM-DD (default: today)',
    )
    @app_commands.autocomplete(skill=skill_autocomplete)
    async def log(
        self,
        interaction: Interaction,
        skill: str,
        duration: Optional[str] = None,
        date_occurred: Optional[str] = None,
    ):
        try:
            record = self.service.add_entry(skill, date_occurred, duration)
            target = self.service.sheet.get_skill(skill)
        except USER_ERRORS as e:
            await self._error(interaction, e)
            return

        message = (
            f'✅ Logged **{fmt_duration(record.duration)}** of **{target.name}** '
            f'(+{fmt_exp(record.base_exp)} EXP)'
        )
        if record.bonus_exp:
            message += f'\n🔥 Streak bonus: +{fmt_exp(record.bonus_exp)} EXP'
        message += f'\n📅 Date: {record.date.isoformat()}'
        message += f'\n⭐ Total: {fmt_exp(target.total_exp)} EXP'
        await interaction.response.send_message(message)

    # Command: /entry_edit
    @app_commands.command(name='entry_edit', description='Change an entry')
    @app_commands.describe(
        skill='Skill the entry belongs to',
        index='Entry number as shown by /entries',
        duration='New minutes spent (leave empty to keep)',
        date_occurred='New date i.e. YYYY-MM-DD (leave empty to keep)',
    )
    @app_commands.autocomplete(skill=skill_autocomplete)
    async def entry_edit(
        self,
        interaction: Interaction,
        skill: str,
        index: int,
        duration: Optional[str] = None,
        date_occurred: Optional[str] = None,
    ):
        try:
            self.service.edit_entry(skill, index, date_occurred, duration)
            target = self.service.sheet.get_skill(skill)
        except USER_ERRORS as e:
            await self._error(interaction, e)
            return
        await interaction.response.send_message(
            '✅ Entry updated.', embed=entries_embed(target), ephemeral=True
        )

    # Command: /entry_remove
    @app_commands.command(name='entry_remove', description='Remove an entry')
    @app_commands.describe(
        skill='Skill the entry belongs to',
        index='Entry number as shown by /entries',
    )
    @app_commands.autocomplete(skill=skill_autocomplete)
    async def entry_remove(self, interaction: Interaction, skill: str, index: int):
        try:
            record = self.service.remove_entry(skill, index)
            target = self.service.sheet.get_skill(skill)
        except USER_ERRORS as e:
            await self._error(interaction, e)
            return
        await interaction.response.send_message(
            f'🗑️ Removed entry from {record.date.isoformat()} '
            f'({fmt_duration(record.duration)})',
            embed=entries_embed(target),
            ephemeral=True,
        )


async def setup(bot: commands.Bot):
    service = getattr(bot, 'sheet_service', None)
    if service is None:
        raise RuntimeError('Bot has no sheet_service, load the sheet before cogs')
    await bot.add_cog(SkillsCog(bot, service))
