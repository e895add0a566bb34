import discord

from skillsheet.models.sheet import Sheet
from skillsheet.models.skill import Skill
from skillsheet.utils.constants import MAX_EMBED_FIELDS


def fmt_exp(value: float) -> str:
    return f'{value:,.1f}'


def fmt_duration(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f'{hours}h {mins}m'
    if hours:
        return f'{hours}h'
    return f'{mins}m'


def sheet_embed(sheet: Sheet) -> discord.Embed:
    '''One field per skill with its total EXP and the bonus waiting for today.'''
    embed = discord.Embed(
        title=f'📜 {sheet.player_name}', color=discord.Color.blurple()
    )

    if not len(sheet):
        embed.description = 'No skills yet. Use /skill_new to start one.'
        return embed

    skills = list(sheet)
    for _, skill in skills[:MAX_EMBED_FIELDS]:
        embed.add_field(
            name=skill.name,
            value=(
                f'EXP: **{fmt_exp(skill.total_exp)}** | '
                f'Next bonus: **+{fmt_exp(skill.potential_bonus)}** | '
                f'Entries: **{len(skill.records)}**'
            ),
            inline=False,
        )

    total = sum(skill.total_exp for _, skill in skills)
    footer = f'Total EXP: {fmt_exp(total)}'
    if len(skills) > MAX_EMBED_FIELDS:
        footer += f' · showing {MAX_EMBED_FIELDS} of {len(skills)} skills'
    embed.set_footer(text=footer)
    return embed


def entries_embed(skill: Skill) -> discord.Embed:
    '''
    Entries are shown newest first but keep their sorted index, which is what
    /entry_edit and /entry_remove take.
    '''
    embed = discord.Embed(title=f'🗂️ {skill.name}', color=discord.Color.blue())

    if not skill.records:
        embed.description = 'No entries yet. Use /log to add one.'
        return embed

    indexed = list(enumerate(skill.records))
    for idx, r in reversed(indexed[-MAX_EMBED_FIELDS:]):
        details = f'⏱️ {fmt_duration(r.duration)}  •  +{fmt_exp(r.base_exp)} EXP'
        if r.bonus_exp:
            details += f'  •  🔥 +{fmt_exp(r.bonus_exp)} bonus'
        embed.add_field(
            name=f'{idx}. 📅 {r.date.isoformat()}', value=details, inline=False
        )

    embed.set_footer(
        text=(
            f'Total EXP: {fmt_exp(skill.total_exp)} · '
            f'Next bonus: +{fmt_exp(skill.potential_bonus)}'
        )
    )
    return embed
