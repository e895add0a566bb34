import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import discord
import pytest
from discord.ext import commands

from skillsheet.cogs.skills_cog import SkillsCog


@dataclass
class FakeResponse:
    sent: list[dict[str, Any]] = field(default_factory=list)

    async def send_message(self, content=None, **kwargs):
        self.sent.append({'content': content, **kwargs})


@dataclass
class FakeUser:
    id: int = 42


@dataclass
class FakeInteraction:
    user: FakeUser = field(default_factory=FakeUser)
    response: FakeResponse = field(default_factory=FakeResponse)
    command: Any = None


@pytest.fixture()
def cog(service, monkeypatch):
    monkeypatch.delenv('OWNER_ID', raising=False)
    bot = commands.Bot(command_prefix='/', intents=discord.Intents.default())
    return SkillsCog(bot, service)


def test_autocomplete_returns_skill_ids(cog, service):
    guitar = service.new_skill('Guitar')
    service.new_skill('Drawing')
    choices = asyncio.run(cog.skill_autocomplete(FakeInteraction(), 'gui'))
    assert [(c.name, c.value) for c in choices] == [('Guitar', guitar)]


def test_log_command_reports_exp(cog, service):
    guitar = service.new_skill('Guitar')
    interaction = FakeInteraction()
    asyncio.run(cog.log.callback(cog, interaction, guitar, '60', '2026-02-10'))

    message = interaction.response.sent[0]['content']
    assert 'Guitar' in message
    assert '+55.0 EXP' in message
    assert len(service.sheet.get_skill(guitar).records) == 1


def test_bad_input_gets_ephemeral_error(cog, service):
    guitar = service.new_skill('Guitar')
    interaction = FakeInteraction()
    asyncio.run(cog.log.callback(cog, interaction, guitar, 'lots', None))

    sent = interaction.response.sent[0]
    assert sent['ephemeral'] is True
    assert sent['content'].startswith('❌')
    assert service.sheet.get_skill(guitar).records == []


def test_owner_check(cog):
    cog.owner_id = 1
    interaction = FakeInteraction()
    assert asyncio.run(cog.interaction_check(interaction)) is False
    assert interaction.response.sent[0]['ephemeral'] is True

    cog.owner_id = 42
    assert asyncio.run(cog.interaction_check(FakeInteraction())) is True


def test_entries_forecast_follows_the_clock(cog, service):
    guitar = service.new_skill('Guitar')
    service.add_entry(guitar, '2026-02-10', '60')
    service.clock = lambda: date(2026, 2, 20)

    interaction = FakeInteraction()
    asyncio.run(cog.entries.callback(cog, interaction, guitar))

    footer = interaction.response.sent[0]['embed'].footer.text
    assert footer.endswith('Next bonus: +0.0')
